from __future__ import annotations

from saasdb.core.logging import redact_sensitive_fields


def test_journal_text_is_redacted() -> None:
    event = {
        "event": "thought_record_created",
        "situation": "argument at work",
        "automatic_thoughts": "I always fail",
        "thought_record_id": "abc",
    }

    result = redact_sensitive_fields(None, "info", event)

    assert result["situation"] == "[redacted]"
    assert result["automatic_thoughts"] == "[redacted]"
    assert result["thought_record_id"] == "abc"
    assert result["event"] == "thought_record_created"


def test_auth_claims_and_payout_details_are_redacted() -> None:
    result = redact_sensitive_fields(
        None,
        "info",
        {"event": "x", "custom_claims": {"admin": True}, "payout_details": {"iban": "DE00"}},
    )

    assert result["custom_claims"] == "[redacted]"
    assert result["payout_details"] == "[redacted]"


def test_events_without_sensitive_fields_are_untouched() -> None:
    event = {"event": "daily_metrics_refreshed", "days": 3}
    assert redact_sensitive_fields(None, "info", dict(event)) == event
