import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

# Journal free text and auth secrets never reach the log stream.
REDACTED_FIELDS = frozenset(
    {
        "automatic_thoughts",
        "balanced_thought",
        "belief_statement",
        "custom_claims",
        "evidence_against",
        "evidence_for",
        "hot_thought",
        "notes",
        "payout_details",
        "situation",
        "therapist_notes",
    }
)


def redact_sensitive_fields(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    for key in REDACTED_FIELDS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            redact_sensitive_fields,
            timestamper,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
