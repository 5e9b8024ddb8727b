# accounts/responses.py
"""Shared response helpers for command-backed views."""

from rest_framework import status
from rest_framework.response import Response


def failure_response(result) -> Response:
    """Render a failed CommandResult as {"detail": ...} with 404 or 400."""
    code = status.HTTP_404_NOT_FOUND if result.not_found else status.HTTP_400_BAD_REQUEST
    return Response({"detail": result.error}, status=code)
