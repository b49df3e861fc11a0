"""API routes implementation."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from shortcodes.errors import (
    CodeSpaceExhaustedError,
    InvalidInputError,
    NotFoundError,
)
from .schemas import (
    EncodeRequest,
    EncodeResponse,
    DecodeRequest,
    DecodeResponse,
    HealthResponse,
    ErrorResponse,
)

router = APIRouter()

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.post(
    "/encode",
    response_model=EncodeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid value"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
        507: {"model": ErrorResponse, "description": "Short code space exhausted"},
    },
    summary="Encode value",
    description="Return the short code for a value, assigning one the first time the value is seen.",
)
async def encode(request: Request, body: EncodeRequest):
    """Encode a value into a short code."""
    service = request.app.state.service

    try:
        code = await service.encode(body.value)
    except InvalidInputError as e:
        return _error(status.HTTP_400_BAD_REQUEST, str(e))
    except CodeSpaceExhaustedError as e:
        return _error(status.HTTP_507_INSUFFICIENT_STORAGE, str(e))
    except Exception:
        logger.exception("Error encoding value")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")

    return EncodeResponse(code=code)


@router.post(
    "/decode",
    response_model=DecodeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed short code"},
        404: {"model": ErrorResponse, "description": "Short code not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Decode short code",
    description="Return the value a short code was assigned to.",
)
async def decode(request: Request, body: DecodeRequest):
    """Decode a short code back into its value."""
    service = request.app.state.service

    try:
        value = await service.decode(body.code)
    except InvalidInputError as e:
        return _error(status.HTTP_400_BAD_REQUEST, str(e))
    except NotFoundError:
        return _error(status.HTTP_404_NOT_FOUND, "not found")
    except Exception:
        logger.exception("Error decoding short code")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")

    return DecodeResponse(value=value)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
