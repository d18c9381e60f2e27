# ovr_core/common/log_context.py
from __future__ import annotations

import logging
from contextvars import ContextVar

# Set by RequestIdMiddleware for the lifetime of one request.
current_request_id: ContextVar[str] = ContextVar("current_request_id", default="-")


class RequestIdFilter(logging.Filter):
    """
    Stamps every record with `request_id` so the formatter can print it,
    including records emitted outside a request (management commands, migrate).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = current_request_id.get()
        return True
