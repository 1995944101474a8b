from django.db.models.deletion import ProtectedError
from rest_framework.response import Response
from rest_framework.status import HTTP_400_BAD_REQUEST
from rest_framework.views import exception_handler


class DomainValidationError(Exception):
    """
    Raised by fleet services when a business rule is violated
    (overlapping booking, unknown task label, concluding a resolved record...).
    custom_exception_handler turns it into HTTP 400.
    """


def _flatten_error_messages(data, prefix: str = "") -> list[str]:
    if isinstance(data, dict):
        messages = []
        for field, value in data.items():
            if field in {"detail", "non_field_errors"}:
                messages.extend(_flatten_error_messages(value, prefix))
            else:
                key = f"{prefix}.{field}" if prefix else str(field)
                messages.extend(_flatten_error_messages(value, key))
        return messages

    if isinstance(data, list):
        joined = ", ".join(
            str(item) for item in data if not isinstance(item, (dict, list))
        )
        nested = [
            message
            for item in data
            if isinstance(item, (dict, list))
            for message in _flatten_error_messages(item, prefix)
        ]
        head = [f"{prefix}: {joined}" if prefix else joined] if joined else []
        return head + nested

    return [f"{prefix}: {data}" if prefix else str(data)]


def custom_exception_handler(exc, context):
    if isinstance(exc, DomainValidationError):
        return Response(
            {
                "success": False,
                "message": str(exc),
                "error": "validation_error",
            },
            status=HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, ProtectedError):
        message = (
            str(exc.args[0]).strip()
            if exc.args and str(exc.args[0]).strip()
            else "Cannot delete this record because it is referenced by related records."
        )
        return Response(
            {
                "success": False,
                "message": message,
                "error": "protected_error",
            },
            status=HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    final_message = "; ".join(_flatten_error_messages(response.data)).strip()
    response.data = {
        "success": False,
        "message": final_message or "An unexpected error occurred.",
        "error": getattr(exc, "code", getattr(exc, "default_code", "error")),
    }
    return response
