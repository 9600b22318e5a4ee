"""
catalog_authz.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Model principal mode, authentication realms and the policy engine endpoint as
  immutable values that are passed to constructors explicitly.
- Hide secrets from repr/logging (JWT secret, bearer tokens, client secrets).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

import enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REALM_KEY = "<default>"


class PrincipalMode(enum.StrEnum):
    # internal: principals are looked up in the trusted identity store.
    # external: principals are synthesized from externally asserted claims.
    internal = "internal"
    external = "external"


class AuthenticationType(enum.StrEnum):
    internal = "internal"
    external = "external"
    mixed = "mixed"


class AuthorizationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    principal_mode: PrincipalMode = PrincipalMode.internal


class RealmAuthenticationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: AuthenticationType = AuthenticationType.internal


class AuthenticationConfig(BaseModel):
    """
    `type` applies to every realm without an explicit entry in `realms`.
    """

    model_config = ConfigDict(frozen=True)

    type: AuthenticationType = AuthenticationType.internal
    realms: dict[str, RealmAuthenticationConfig] = Field(default_factory=dict)

    def for_realm(self, realm: str) -> RealmAuthenticationConfig:
        return self.realms.get(realm) or RealmAuthenticationConfig(type=self.type)


class ClaimsMappingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Dotted paths into the JWT payload, e.g. "realm_access.roles".
    id_claim_path: str = "sub"
    name_claim_path: str = "preferred_username"
    roles_claim_path: str = "roles"
    roles_filter: str = ".*"


class BearerTokenConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["none", "static", "file", "client_credentials"] = "none"

    # static
    static_token: SecretStr | None = None

    # file
    token_file: Path | None = None
    refresh_interval_seconds: float = Field(default=300.0, gt=0)
    jwt_expiration_refresh: bool = True
    jwt_expiration_buffer_seconds: float = Field(default=60.0, ge=0)

    # client_credentials
    token_url: str | None = None
    client_id: str | None = None
    client_secret: SecretStr | None = None
    scope: str | None = None


class PolicyEngineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    policy_uri: str = "http://localhost:8181/v1/data/catalog/authz"
    http_method: Literal["POST", "PUT"] = "POST"
    timeout_seconds: float = Field(default=5.0, gt=0)
    max_retries: int = Field(default=1, ge=0, le=5)
    retry_backoff_seconds: float = Field(default=0.1, ge=0)
    verify_tls: bool = True
    # What the authorizer does when the engine cannot produce a decision.
    unavailable_mode: Literal["fail_closed", "fail_open"] = "fail_closed"
    auth: BearerTokenConfig = Field(default_factory=BearerTokenConfig)


class Settings(BaseSettings):
    """
    Enterprise pattern:
    - Strict env-driven configuration
    - Defaults safe for local dev
    - Single immutable settings object injected across layers
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_AUTHZ_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
    )

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "catalog-authz"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Inbound (host) auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "catalog-authz"
    jwt_audience: str = "catalog-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Trusted identity store
    database_url: str = "sqlite+aiosqlite:///./catalog_authz.db"

    authorization: AuthorizationConfig = Field(default_factory=AuthorizationConfig)
    authentication: AuthenticationConfig = Field(default_factory=AuthenticationConfig)
    claims: ClaimsMappingConfig = Field(default_factory=ClaimsMappingConfig)
    policy_engine: PolicyEngineConfig = Field(default_factory=PolicyEngineConfig)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Settings are read once at process start and never mutated; tests construct
# `Settings(...)` directly to vary principal/authentication modes per case.
