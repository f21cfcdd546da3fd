"""Fixturely modules. Import each module through its package interface."""
