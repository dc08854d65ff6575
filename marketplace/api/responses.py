from rest_framework import status as http_status
from rest_framework.response import Response


def envelope(data=None, message: str = "", status: int = http_status.HTTP_200_OK) -> Response:
    """Every successful response is ``{"data": ..., "message": ...}``."""
    return Response({"data": data, "message": message}, status=status)
