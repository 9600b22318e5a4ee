"""
catalog_authz.policy.tokens

Bearer token providers used to authenticate to the policy engine.

Responsibilities:
- Static tokens fixed at construction.
- Refreshable tokens (token file, OAuth2 client credentials) cached until shortly
  before expiry, with single-flight refresh shared by concurrent callers.
- Build the configured provider from settings.
"""

from __future__ import annotations

import abc
import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Protocol

import httpx

from catalog_authz.auth.jwt import unverified_expiry
from catalog_authz.errors import ConfigurationError, TokenAcquisitionError
from catalog_authz.observability.logging import get_logger
from catalog_authz.settings import BearerTokenConfig

log = get_logger(__name__)


class BearerTokenProvider(Protocol):
    async def get_token(self) -> str: ...

    async def aclose(self) -> None: ...


class StaticBearerTokenProvider:
    def __init__(self, token: str) -> None:
        if not token or not token.strip():
            raise ValueError("static bearer token must not be empty")
        self._token = token.strip()

    async def get_token(self) -> str:
        return self._token

    async def aclose(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class AccessToken:
    value: str
    # Wall-clock epoch seconds; None means "never expires".
    expires_at: float | None


class RefreshingBearerTokenProvider(abc.ABC):
    """
    Caches one `AccessToken` and refreshes it through a single shared task.

    Concurrent callers that find the token missing or about to expire all await
    the same fetch. Callers await it through `asyncio.shield`, so cancelling one
    caller never cancels the fetch, and the cached token is only replaced by a
    completed fetch.
    """

    def __init__(
        self,
        *,
        refresh_margin: timedelta = timedelta(seconds=30),
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._refresh_margin = refresh_margin.total_seconds()
        self._clock = clock
        # (token, refresh deadline)
        self._current: tuple[AccessToken, float | None] | None = None
        self._inflight: asyncio.Task[AccessToken] | None = None

    @abc.abstractmethod
    async def _fetch(self) -> AccessToken:
        raise NotImplementedError

    def _refresh_deadline(self, token: AccessToken) -> float | None:
        if token.expires_at is None:
            return None
        # Short-lived tokens refresh at half their lifetime instead of on every call.
        ttl = max(token.expires_at - self._clock(), 0.0)
        return token.expires_at - min(self._refresh_margin, ttl / 2)

    async def get_token(self) -> str:
        current = self._current
        if current is not None:
            token, deadline = current
            if deadline is None or self._clock() < deadline:
                return token.value

        task = self._inflight
        if task is None:
            task = asyncio.create_task(self._refresh())
            task.add_done_callback(self._on_refresh_done)
            self._inflight = task
        token = await asyncio.shield(task)
        return token.value

    async def _refresh(self) -> AccessToken:
        try:
            token = await self._fetch()
        except TokenAcquisitionError:
            log.error("token_refresh_failed", provider=type(self).__name__)
            raise
        except Exception as e:
            log.error("token_refresh_failed", provider=type(self).__name__, error=str(e))
            raise TokenAcquisitionError(f"Failed to obtain bearer token: {e}") from e

        if not token.value:
            raise TokenAcquisitionError("Token source returned an empty token")
        self._current = (token, self._refresh_deadline(token))
        log.info("token_refreshed", provider=type(self).__name__, expires_at=token.expires_at)
        return token

    def _on_refresh_done(self, task: asyncio.Task[AccessToken]) -> None:
        if self._inflight is task:
            self._inflight = None
        # Mark the exception as retrieved even if every waiter was cancelled.
        if not task.cancelled():
            task.exception()

    async def aclose(self) -> None:
        task = self._inflight
        self._inflight = None
        self._current = None
        if task is not None and not task.done():
            task.cancel()


class FileBearerTokenProvider(RefreshingBearerTokenProvider):
    """
    Re-reads a token file (e.g. a projected service-account token).
    JWT tokens are refreshed ahead of their `exp`; opaque tokens every `refresh_interval`.
    """

    def __init__(
        self,
        path: Path,
        *,
        refresh_interval: timedelta = timedelta(minutes=5),
        jwt_expiration_refresh: bool = True,
        jwt_expiration_buffer: timedelta = timedelta(minutes=1),
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(refresh_margin=timedelta(0), clock=clock)
        self._path = path
        self._refresh_interval = refresh_interval.total_seconds()
        self._jwt_expiration_refresh = jwt_expiration_refresh
        self._jwt_expiration_buffer = jwt_expiration_buffer.total_seconds()

    async def _fetch(self) -> AccessToken:
        try:
            raw = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except OSError as e:
            raise TokenAcquisitionError(f"Unable to read token file {self._path}: {e}") from e

        value = raw.strip()
        if not value:
            raise TokenAcquisitionError(f"Token file {self._path} is empty")

        now = self._clock()
        expires_at = now + self._refresh_interval
        if self._jwt_expiration_refresh:
            exp = unverified_expiry(value)
            if exp is not None:
                expires_at = max(now, exp.timestamp() - self._jwt_expiration_buffer)
        return AccessToken(value=value, expires_at=expires_at)


class ClientCredentialsTokenProvider(RefreshingBearerTokenProvider):
    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        token_url: str,
        client_id: str,
        client_secret: str,
        scope: str | None = None,
        default_ttl: timedelta = timedelta(minutes=5),
        refresh_margin: timedelta = timedelta(seconds=30),
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(refresh_margin=refresh_margin, clock=clock)
        self._http = http
        self._token_url = token_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._scope = scope
        self._default_ttl = default_ttl.total_seconds()

    async def _fetch(self) -> AccessToken:
        form = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }
        if self._scope:
            form["scope"] = self._scope

        try:
            r = await self._http.post(self._token_url, data=form)
            r.raise_for_status()
            body = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TokenAcquisitionError(f"Token endpoint request failed: {e}") from e

        access_token = body.get("access_token") if isinstance(body, dict) else None
        if not isinstance(access_token, str) or not access_token:
            raise TokenAcquisitionError("Token endpoint response has no access_token")

        expires_in = body.get("expires_in")
        ttl = (
            float(expires_in)
            if isinstance(expires_in, (int, float)) and not isinstance(expires_in, bool)
            else self._default_ttl
        )
        return AccessToken(value=access_token, expires_at=self._clock() + ttl)


def build_token_provider(
    config: BearerTokenConfig, *, http: httpx.AsyncClient
) -> BearerTokenProvider | None:
    if config.type == "none":
        return None

    if config.type == "static":
        if config.static_token is None or not config.static_token.get_secret_value().strip():
            raise ConfigurationError("policy_engine.auth.static_token is required for type=static")
        return StaticBearerTokenProvider(config.static_token.get_secret_value())

    if config.type == "file":
        if config.token_file is None:
            raise ConfigurationError("policy_engine.auth.token_file is required for type=file")
        return FileBearerTokenProvider(
            config.token_file,
            refresh_interval=timedelta(seconds=config.refresh_interval_seconds),
            jwt_expiration_refresh=config.jwt_expiration_refresh,
            jwt_expiration_buffer=timedelta(seconds=config.jwt_expiration_buffer_seconds),
        )

    if not (config.token_url and config.client_id and config.client_secret):
        raise ConfigurationError(
            "policy_engine.auth.token_url, client_id and client_secret are required "
            "for type=client_credentials"
        )
    return ClientCredentialsTokenProvider(
        http=http,
        token_url=config.token_url,
        client_id=config.client_id,
        client_secret=config.client_secret.get_secret_value(),
        scope=config.scope,
    )


# --- Module Notes -----------------------------------------------------------
# The decision client turns `TokenAcquisitionError` into `PolicyEngineUnavailable`;
# callers of the client never see token errors directly.
