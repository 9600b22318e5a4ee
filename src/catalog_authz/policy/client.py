"""
catalog_authz.policy.client

HTTP client boundary used to ask the policy engine for decisions.

Responsibilities:
- Attach bearer credentials from the configured token provider.
- Submit `{"input": <document>}` to the configured policy URI with a bounded timeout.
- Parse `result.allow`, separating engine outages from malformed answers.
- Retry transient failures a bounded number of times.
- Notify injected observers of the exact request/response payloads.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from catalog_authz.errors import (
    PolicyEngineMalformedResponse,
    PolicyEngineUnavailable,
    TokenAcquisitionError,
)
from catalog_authz.observability.logging import get_logger
from catalog_authz.policy.input import AuthorizationInput
from catalog_authz.policy.tokens import BearerTokenProvider
from catalog_authz.settings import PolicyEngineConfig

log = get_logger(__name__)

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


@dataclass(frozen=True, slots=True)
class PolicyDecision:
    allow: bool
    decision_id: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict)


class DecisionObserver(Protocol):
    def on_request(self, payload: Mapping[str, Any]) -> None: ...

    def on_response(self, payload: Mapping[str, Any]) -> None: ...


def parse_decision(body: Any) -> PolicyDecision:
    if not isinstance(body, dict):
        raise PolicyEngineMalformedResponse("Policy engine response is not a JSON object")
    result = body.get("result")
    if not isinstance(result, dict) or "allow" not in result:
        raise PolicyEngineMalformedResponse("Policy engine response has no 'result.allow' field")
    allow = result["allow"]
    if not isinstance(allow, bool):
        raise PolicyEngineMalformedResponse(
            f"Policy engine 'result.allow' is not a boolean: {type(allow).__name__}"
        )
    decision_id = body.get("decision_id")
    return PolicyDecision(
        allow=allow,
        decision_id=str(decision_id) if decision_id is not None else None,
        raw=body,
    )


class PolicyDecisionClient:
    """
    The httpx client is owned by the caller (created once per process in the app lifespan).
    """

    def __init__(
        self,
        *,
        policy_uri: str,
        http: httpx.AsyncClient,
        token_provider: BearerTokenProvider | None = None,
        http_method: str = "POST",
        timeout_seconds: float = 5.0,
        max_retries: int = 0,
        retry_backoff_seconds: float = 0.1,
        observers: Sequence[DecisionObserver] = (),
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._policy_uri = policy_uri
        self._http = http
        self._token_provider = token_provider
        self._method = http_method.upper()
        self._timeout_seconds = timeout_seconds
        self._timeout = httpx.Timeout(timeout_seconds)
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff_seconds
        self._observers = tuple(observers)

    @classmethod
    def from_config(
        cls,
        config: PolicyEngineConfig,
        *,
        http: httpx.AsyncClient,
        token_provider: BearerTokenProvider | None,
        observers: Sequence[DecisionObserver] = (),
    ) -> PolicyDecisionClient:
        return cls(
            policy_uri=config.policy_uri,
            http=http,
            token_provider=token_provider,
            http_method=config.http_method,
            timeout_seconds=config.timeout_seconds,
            max_retries=config.max_retries,
            retry_backoff_seconds=config.retry_backoff_seconds,
            observers=observers,
        )

    async def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token_provider is None:
            return headers
        try:
            token = await self._token_provider.get_token()
        except TokenAcquisitionError as e:
            raise PolicyEngineUnavailable(f"Unable to obtain policy engine credentials: {e}") from e
        headers["Authorization"] = f"Bearer {token}"
        return headers

    async def decide(self, document: AuthorizationInput) -> PolicyDecision:
        payload: dict[str, Any] = {"input": document}
        for observer in self._observers:
            observer.on_request(payload)

        r = await self._send_with_retries(payload)
        try:
            body = r.json()
        except ValueError as e:
            raise PolicyEngineMalformedResponse("Policy engine response is not valid JSON") from e

        for observer in self._observers:
            observer.on_response(body)

        decision = parse_decision(body)
        log.debug(
            "policy_decision",
            action=document.get("action"),
            allow=decision.allow,
            decision_id=decision.decision_id,
        )
        return decision

    async def _send_with_retries(self, payload: dict[str, Any]) -> httpx.Response:
        attempt = 0
        while True:
            headers = await self._headers()
            try:
                # httpx timeouts apply per phase; this bounds the whole attempt.
                async with asyncio.timeout(self._timeout_seconds):
                    r = await self._http.request(
                        self._method,
                        self._policy_uri,
                        json=payload,
                        headers=headers,
                        timeout=self._timeout,
                    )
            except httpx.DecodingError as e:
                raise PolicyEngineMalformedResponse(
                    f"Policy engine response body could not be decoded: {e}"
                ) from e
            except (TimeoutError, httpx.TransportError) as e:
                timed_out = isinstance(e, TimeoutError | httpx.TimeoutException)
                kind = "timed out" if timed_out else "transport failure"
                error = PolicyEngineUnavailable(f"Policy engine request {kind}: {e!r}")
                error.__cause__ = e
                retryable = True
            except httpx.RequestError as e:
                error = PolicyEngineUnavailable(f"Policy engine request failed: {e!r}")
                error.__cause__ = e
                retryable = False
            else:
                if r.is_success:
                    return r
                error = PolicyEngineUnavailable(f"Policy engine returned HTTP {r.status_code}")
                retryable = r.status_code in _RETRYABLE_STATUS

            if not retryable or attempt >= self._max_retries:
                log.error(
                    "policy_engine_unavailable",
                    policy_uri=self._policy_uri,
                    attempts=attempt + 1,
                    error=str(error),
                )
                raise error

            delay = self._retry_backoff * (2**attempt)
            log.warning("policy_retry", attempt=attempt + 1, delay=delay, error=str(error))
            attempt += 1
            await asyncio.sleep(delay)


# --- Module Notes -----------------------------------------------------------
# Retries are bounded by `max_retries`; a decision never loops indefinitely on a
# sick engine and the request path is released with `PolicyEngineUnavailable`.
