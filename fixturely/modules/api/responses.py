"""
Uniform JSON response envelope.

Success: {"status": "success", "message": ..., "data": ...}
Error:   {"status": "error", "message": ..., "error": ...}
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

GENERIC_SERVER_ERROR = (
    "Your request could not be processed at this time. Kindly try again later."
)


def success_response(status_code: int, message: str = "", data: Any = None) -> JSONResponse:
    """Build a success envelope."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"status": "success", "message": message, "data": data}),
    )


def error_response(status_code: int, message: str, error: Any = "") -> JSONResponse:
    """Build an error envelope."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"status": "error", "message": message, "error": error}),
    )


def server_error(error: Any, production: bool) -> JSONResponse:
    """
    Build a 500 envelope.

    Args:
        error: Error detail (shown only outside production)
        production: Whether the process runs in production

    Returns:
        JSONResponse with a production-safe message
    """
    message = GENERIC_SERVER_ERROR if production else str(error)
    return JSONResponse(status_code=500, content={"status": "error", "message": message})


def method_not_allowed() -> JSONResponse:
    """Response for any route or method the API does not serve."""
    return JSONResponse(status_code=405, content={"error": "Method not allowed"})
