"""
corecode/exceptions.py
Domain errors shared by every app + the DRF exception handler that turns
them into ``{"error": "..."}`` JSON bodies.
"""

from __future__ import annotations

import logging

from django.core.exceptions import (
    ObjectDoesNotExist,
    PermissionDenied,
    ValidationError,
)
from django.db import IntegrityError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ConflictError(Exception):
    """State clash: duplicate milestone voucher, duplicate name, protected row."""

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra


def _validation_payload(exc: ValidationError) -> dict:
    if hasattr(exc, "error_dict"):
        details = {f: [str(m) for e in errs for m in e.messages] for f, errs in exc.error_dict.items()}
        first = next(iter(details.values()), ["Invalid data."])
        return {"error": first[0], "details": details}
    return {"error": " ".join(exc.messages)}


def _drf_message(data) -> str:
    """Pull the first human-readable message out of a DRF error payload."""
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        for key, value in data.items():
            msg = _drf_message(value)
            return msg if key == "non_field_errors" else f"{key}: {msg}"
    if isinstance(data, list) and data:
        return _drf_message(data[0])
    return str(data)


def api_exception_handler(exc, context):
    """
    Map domain + Django exceptions onto HTTP statuses:

    • ValidationError        → 400
    • PermissionDenied       → 403
    • DoesNotExist / Http404 → 404
    • ConflictError          → 409
    • IntegrityError         → 409 (uniqueness raced past the service check)
    """
    if isinstance(exc, ValidationError):
        return Response(_validation_payload(exc), status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, ConflictError):
        return Response({"error": exc.message, **exc.extra}, status=status.HTTP_409_CONFLICT)

    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error surfaced as conflict: %s", exc)
        return Response({"error": "Conflicting record already exists."}, status=status.HTTP_409_CONFLICT)

    if isinstance(exc, PermissionDenied):
        return Response({"error": str(exc) or "Access denied"}, status=status.HTTP_403_FORBIDDEN)

    if isinstance(exc, ObjectDoesNotExist):
        message = str(exc).replace(" matching query does not exist.", " not found.")
        return Response({"error": message or "Not found."}, status=status.HTTP_404_NOT_FOUND)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, (APIException, Http404)):
        payload = {"error": _drf_message(response.data)}
        if isinstance(response.data, dict) and "detail" not in response.data:
            payload["details"] = response.data
        response.data = payload
    return response
