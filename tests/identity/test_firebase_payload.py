from __future__ import annotations

import pytest
from pydantic import ValidationError

from saasdb.identity.schemas import FirebaseUserPayload


def test_payload_ignores_unmapped_firebase_fields() -> None:
    payload = FirebaseUserPayload.model_validate(
        {
            "uid": "fb-123",
            "email": "ana@example.com",
            "email_verified": True,
            "disabled": False,
            "tokens_valid_after_time": "2026-01-01T00:00:00Z",
            "provider_data": [
                {
                    "provider_id": "google.com",
                    "uid": "g-1",
                    "email": "ana@example.com",
                    "display_name": "Ana",
                    "raw_id": "ignored",
                }
            ],
        }
    )

    assert payload.uid == "fb-123"
    assert payload.email_verified is True
    assert payload.provider_data[0].provider_id == "google.com"


def test_provider_snapshot_drops_keys_and_empty_values() -> None:
    payload = FirebaseUserPayload.model_validate(
        {
            "uid": "fb-123",
            "provider_data": [{"provider_id": "password", "uid": "ana@example.com", "email": "ana@example.com"}],
        }
    )

    assert payload.provider_snapshot(payload.provider_data[0]) == {"email": "ana@example.com"}


def test_payload_defaults() -> None:
    payload = FirebaseUserPayload(uid="fb-9")
    assert payload.email is None
    assert payload.email_verified is False
    assert payload.provider_data == []


def test_payload_requires_uid() -> None:
    with pytest.raises(ValidationError):
        FirebaseUserPayload.model_validate({"uid": ""})
