from __future__ import annotations

from catalog_authz.observability.logging import REDACTED, redact_secrets


def test_secrets_are_masked() -> None:
    event = redact_secrets(
        None,
        "info",
        {"event": "token_refreshed", "access_token": "eyJ...", "client_secret": "s3cret", "expires_in": 300},
    )

    assert event == {
        "event": "token_refreshed",
        "access_token": REDACTED,
        "client_secret": REDACTED,
        "expires_in": 300,
    }
