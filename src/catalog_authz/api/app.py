"""
catalog_authz.api.app

FastAPI app factory for the catalog authorization service.

Responsibilities:
- Validate principal/authentication mode consistency before anything is served.
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (identity-store engine, policy-engine
  HTTP client, token provider, authorizer).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from catalog_authz import __version__
from catalog_authz.api.routers.authorize import router as authorize_router
from catalog_authz.api.routers.dev_auth import router as dev_auth_router
from catalog_authz.api.routers.health import router as health_router
from catalog_authz.db.init_db import init_db
from catalog_authz.db.session import create_engine, create_sessionmaker
from catalog_authz.observability.logging import configure_logging, get_logger
from catalog_authz.observability.middleware import RequestContextMiddleware
from catalog_authz.policy.authorizer import PolicyAuthorizer
from catalog_authz.policy.client import PolicyDecisionClient
from catalog_authz.policy.tokens import build_token_provider
from catalog_authz.settings import Settings
from catalog_authz.validation import validate_principal_mode

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    policy_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    `policy_transport` replaces the network transport of the policy-engine client
    (tests route it to an in-process fake engine).
    """

    configure_logging(service_name=settings.service_name, level=settings.log_level)
    # Fail fast: an inconsistent principal mode must never reach request handling.
    validate_principal_mode(settings.authorization, settings.authentication)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.env,
            principal_mode=str(settings.authorization.principal_mode),
        )
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            await init_db(engine)

        engine_cfg = settings.policy_engine
        http = httpx.AsyncClient(
            transport=policy_transport,
            verify=engine_cfg.verify_tls,
            timeout=httpx.Timeout(engine_cfg.timeout_seconds),
        )
        token_provider = build_token_provider(engine_cfg.auth, http=http)
        client = PolicyDecisionClient.from_config(engine_cfg, http=http, token_provider=token_provider)
        app.state.authorizer = PolicyAuthorizer(
            client=client, unavailable_mode=engine_cfg.unavailable_mode
        )
        try:
            yield
        finally:
            if token_provider is not None:
                await token_provider.aclose()
            await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Catalog Authorization Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(authorize_router)
    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; decision logic lives in `catalog_authz.policy` and
# principal resolution in `catalog_authz.auth`.
