from __future__ import annotations

from cat_registry.core.logging import drop_sensitive_keys


def test_credentials_are_redacted() -> None:
    event = {"event": "login_attempt", "email": "alice@example.com", "password": "hunter22"}

    result = drop_sensitive_keys(None, "info", event)

    assert result["password"] == "[redacted]"
    assert result["email"] == "alice@example.com"


def test_events_without_credentials_pass_through() -> None:
    event = {"event": "cat_created", "cat_id": "c1"}

    assert drop_sensitive_keys(None, "info", dict(event)) == event
