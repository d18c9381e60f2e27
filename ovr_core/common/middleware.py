from __future__ import annotations

import logging
import re
import time

from django.utils.deprecation import MiddlewareMixin

from ovr_core.common.api.exceptions import ensure_request_id
from ovr_core.common.log_context import current_request_id

logger = logging.getLogger(__name__)

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIdMiddleware(MiddlewareMixin):
    """
    Gives every request a request id and logs one line per API call.

    Behavior:
      - Honours an incoming X-Request-Id header when it is short and printable,
        otherwise generates one.
      - Attaches request.request_id (the same id the error envelope reports).
      - Echoes the id in the X-Request-Id response header.
      - Logs method, path, status and duration for /api/ paths.
    """

    HEADER_META_KEY = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-Id"
    LOGGED_PREFIXES = ("/api/",)

    def process_request(self, request):
        incoming = request.META.get(self.HEADER_META_KEY, "")
        if incoming and _SAFE_REQUEST_ID.match(incoming):
            request.request_id = incoming
        rid = ensure_request_id(request)

        request._request_id_token = current_request_id.set(rid)
        request._started_at = time.monotonic()
        return None

    def process_response(self, request, response):
        rid = ensure_request_id(request)
        response[self.RESPONSE_HEADER] = rid

        path = getattr(request, "path", "") or ""
        started = getattr(request, "_started_at", None)
        if started is not None and path.startswith(self.LOGGED_PREFIXES):
            duration_ms = (time.monotonic() - started) * 1000
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                "%s %s -> %s (%.1f ms)",
                request.method,
                path,
                response.status_code,
                duration_ms,
            )

        token = getattr(request, "_request_id_token", None)
        if token is not None:
            current_request_id.reset(token)
            request._request_id_token = None
        return response
