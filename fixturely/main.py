#!/usr/bin/env python3
"""
Fixturely - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Builds the application context (modules and shared resources)
3. Exposes the REST API

All business logic is in the modules, following black box principles.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Dict, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Header, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from fixturely import __version__
from fixturely.config.provider import ConfigProvider, EnvConfigProvider, RuntimeConfig
from fixturely.context import AppContext, ContextFactory
from fixturely.logging_config import REQUEST_LOGGER, configure_logging, get_logging_config
from fixturely.modules.api import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
    error_response,
    method_not_allowed,
    server_error,
    success_response,
)
from fixturely.modules.cache import CacheBackendError, CacheKeys
from fixturely.modules.records import any_matching

logger = logging.getLogger(__name__)
request_logger = logging.getLogger(REQUEST_LOGGER)


class AuthenticationError(Exception):
    """The request carries no usable identity."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Dependency injection helpers


def get_context(request: Request) -> AppContext:
    """Return the application context built at startup."""
    return request.app.state.context


async def load_user(context: AppContext, user_id: Any) -> Optional[Dict[str, Any]]:
    """Load the public view of a user through the cache."""

    async def from_store() -> Optional[Dict[str, Any]]:
        record = await context.records.user_exists(id=user_id)
        if record is None:
            return None
        return UserResponse.from_record(record).model_dump(mode="json")

    return await context.cache.get_or_load(CacheKeys.user(user_id), from_store)


async def as_json(pending: Awaitable[Optional[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """Await a document-store read and reduce the record to JSON-safe values."""
    record = await pending
    return None if record is None else jsonable_encoder(record)


async def current_user(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token"),
    context: AppContext = Depends(get_context),
) -> Dict[str, Any]:
    """
    Resolve the authenticated user.

    A Bearer token takes precedence; without one the session user is used.
    """
    if authorization:
        result = context.tokens.check(authorization)
        if not result.ok:
            raise AuthenticationError(result.message)

        user_id = result.payload.get("id")
        user = await load_user(context, user_id) if user_id is not None else None
        if user is None:
            raise AuthenticationError("Invalid token")

        context.sessions.write(request, user)
        return user

    user = context.sessions.read(request)
    if user is None:
        raise AuthenticationError("Authentication required")
    return user


async def authenticated_response(
    request: Request,
    context: AppContext,
    record: Dict[str, Any],
    status_code: int,
    message: str,
):
    """Issue a token for a user record and remember the user."""
    user = UserResponse.from_record(record)
    public = user.model_dump(mode="json")

    token = context.tokens.issue({"id": user.id})
    context.sessions.write(request, public)
    await context.cache.store(CacheKeys.user(user.id), public)

    return success_response(
        status_code, message, AuthResponse(token=token, user=user).model_dump()
    )


# Routes

router = APIRouter(prefix="/api/v1")


@router.post("/auth/signup", status_code=201)
async def signup(
    payload: SignupRequest,
    request: Request,
    context: AppContext = Depends(get_context),
):
    """
    Create an account.

    Returns:
        201: Account created, token issued
        409: Email already registered
    """
    if await context.records.user_exists(email=payload.email):
        return error_response(409, "User already exists", "An account with this email already exists")

    hashed = await context.credentials.hash(payload.password)
    record = await context.records.users.insert_one(
        {"name": payload.name, "email": payload.email, "password": hashed}
    )
    logger.info(f"Created account {record['id']}")

    return await authenticated_response(request, context, record, 201, "Account created successfully")


@router.post("/auth/login")
async def login(
    payload: LoginRequest,
    request: Request,
    context: AppContext = Depends(get_context),
):
    """
    Log in with email and password.

    Returns:
        200: Token issued
        401: Wrong email or password
    """
    record = await context.records.user_exists(email=payload.email)
    if not record or not context.credentials.verify(payload.password, record.get("password", "")):
        return error_response(401, "Invalid credentials", "Email or password is incorrect")

    return await authenticated_response(request, context, record, 200, "Login successful")


@router.post("/auth/logout")
async def logout(
    request: Request,
    user: Dict[str, Any] = Depends(current_user),
    context: AppContext = Depends(get_context),
):
    """Forget the session user and drop its cache entry."""
    context.sessions.clear(request)
    await context.cache.evict(CacheKeys.user(user["id"]))
    return success_response(200, "Logout successful")


@router.get("/users/me")
async def me(user: Dict[str, Any] = Depends(current_user)):
    """Return the authenticated user."""
    return success_response(200, "User retrieved successfully", user)


@router.get("/fixtures/{fixture_id}")
async def get_fixture(fixture_id: str, context: AppContext = Depends(get_context)):
    """Return a fixture, served from the cache when possible."""
    fixture = await context.cache.get_or_load(
        CacheKeys.fixture(fixture_id),
        lambda: as_json(context.records.fixture_exists(id=fixture_id)),
    )
    if fixture is None:
        return error_response(404, "Fixture not found", f"No fixture with id {fixture_id}")
    return success_response(200, "Fixture retrieved successfully", fixture)


@router.get("/teams")
async def search_teams(search: Optional[str] = None, context: AppContext = Depends(get_context)):
    """List teams, optionally filtered by name or short name."""
    if search:
        teams = await any_matching(context.records.teams, {"name": search, "short_name": search})
    else:
        teams = await context.records.teams.find({})
    return success_response(200, "Teams retrieved successfully", teams)


@router.get("/teams/{team_id}")
async def get_team(team_id: str, context: AppContext = Depends(get_context)):
    """Return a team, served from the cache when possible."""
    team = await context.cache.get_or_load(
        CacheKeys.team(team_id),
        lambda: as_json(context.records.team_exists(id=team_id)),
    )
    if team is None:
        return error_response(404, "Team not found", f"No team with id {team_id}")
    return success_response(200, "Team retrieved successfully", team)


# Application factory


def create_app(
    context: Optional[AppContext] = None,
    config_provider: Optional[ConfigProvider] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        context: Pre-built context (tests); built at startup when omitted
        config_provider: Configuration provider (environment by default)

    Returns:
        Configured FastAPI application
    """
    if context is not None:
        runtime: RuntimeConfig = context.runtime
    else:
        config_provider = config_provider or EnvConfigProvider()
        runtime = config_provider.get_runtime_config()
        configure_logging(runtime.log_level, runtime.environment)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle - build and release the context."""
        owns_context = context is None
        if owns_context:
            logger.info(f"Starting Fixturely API in {runtime.environment} environment...")
            app.state.context = ContextFactory.build(config_provider)

        yield

        if owns_context:
            logger.info("Shutting down Fixturely API...")
            await app.state.context.close()

    app = FastAPI(
        title="Fixturely API",
        description="Fixturely - Sports fixtures, teams and accounts",
        version=__version__,
        lifespan=lifespan,
    )
    if context is not None:
        app.state.context = context

    app.add_middleware(SessionMiddleware, secret_key=runtime.session_secret)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=runtime.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if runtime.is_development:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            """Development request log."""
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            request_logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f} ms")
            return response

    app.include_router(router)

    @app.get("/health")
    async def health(request: Request):
        """
        Health check endpoint.

        Returns:
            200: Service healthy
            503: Cache backend unreachable
        """
        ctx: AppContext = request.app.state.context
        try:
            await ctx.redis_client.ping()
        except RedisError as e:
            logger.error(f"Health check failed: {e}")
            return error_response(503, "Service unhealthy", "Cache backend unreachable")

        return success_response(
            200,
            "Service healthy",
            {"redis": "connected", "environment": runtime.environment, "version": __version__},
        )

    # Error handlers

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        """Unknown routes and unsupported methods, whatever the verb, answer 405."""
        if exc.status_code in (404, 405):
            return method_not_allowed()
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request, exc):
        return error_response(401, exc.message, "Unauthorized")

    @app.exception_handler(CacheBackendError)
    async def cache_error_handler(request, exc):
        """Cache outages surface as a production-safe 500."""
        logger.error(f"Cache backend error: {exc}")
        return server_error(exc, production=runtime.is_production)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request, exc):
        errors = [
            {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
            for error in exc.errors()
        ]
        return error_response(400, "Invalid request", errors)

    @app.exception_handler(ValueError)
    async def validation_error_handler(request, exc):
        """Handle validation errors."""
        logger.error(f"Validation error: {exc}")
        return error_response(400, "Invalid request", str(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request, exc):
        """Any other failure becomes a production-safe 500."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return server_error(exc, production=runtime.is_production)

    return app


def run() -> None:
    """Run the API server."""
    config_provider = EnvConfigProvider()
    runtime = config_provider.get_runtime_config()
    uvicorn.run(
        "fixturely.main:create_app",
        factory=True,
        host=runtime.host,
        port=runtime.port,
        log_level=runtime.log_level.lower(),
        log_config=get_logging_config(runtime.log_level, runtime.environment),
    )


if __name__ == "__main__":
    run()
