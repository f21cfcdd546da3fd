"""
Fixturely - Sports Fixture API

Authentication, session and cache-aside layer for a sports-fixture backend.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- Shared resources are injected through the application context
- No module reads process configuration directly

Modules:
- credentials: Password hashing and verification
- tokens: Signed, time-limited identity tokens
- cache: Cache-aside adapter over Redis
- sessions: Current-user storage per runtime mode
- records: Record-existence lookups against the document store
- api: Response envelope and request models
"""

__version__ = "1.0.0"
