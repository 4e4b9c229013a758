from __future__ import annotations

import logging

REDACTED_ATTRS = ("request", "request_body", "data", "body", "text", "push_token", "tokens")


class StripRequestBodyFilter(logging.Filter):
    """
    Drop request bodies, chat text and push tokens from log records to avoid leaking PII.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        for attr in REDACTED_ATTRS:
            if hasattr(record, attr):
                setattr(record, attr, None)
        return True
