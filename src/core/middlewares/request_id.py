from __future__ import annotations

import uuid


class RequestIDMiddleware:
    """
    Gives every request a correlation id (incoming X-Request-ID or a fresh uuid4)
    and echoes it back. RequestContextFilter picks it up from `request.request_id`.
    """

    REQUEST_META_HEADER = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"
    REQUEST_ATTR = "request_id"
    MAX_LENGTH = 128

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = self.resolve_request_id(request.META.get(self.REQUEST_META_HEADER))
        setattr(request, self.REQUEST_ATTR, request_id)

        response = self.get_response(request)
        response[self.RESPONSE_HEADER] = request_id
        return response

    @classmethod
    def resolve_request_id(cls, raw_value) -> str:
        if isinstance(raw_value, str) and raw_value.strip():
            return raw_value.strip()[: cls.MAX_LENGTH]
        return uuid.uuid4().hex
