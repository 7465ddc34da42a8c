"""API error types and the handlers that render them as error envelopes.

Every failure leaves the service in the same shape::

    {"statusCode": 409, "message": "...", "success": false, "errors": [...]}
"""

import logging
from typing import Any, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Something went wrong'

    def __init__(
        self,
        message: str | None = None,
        errors: Sequence[Any] = (),
        status_code: int | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = list(errors)
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid request'


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Resource already exists'


class NotFoundError(ApiError):
    # Unknown users on login answer 400 to stay compatible with existing clients.
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Resource does not exist'


class AuthenticationError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = 'Unauthorized request'


class UploadError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'File upload failed'


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Something went wrong'


def error_envelope(status_code: int, message: str, errors: Sequence[Any] = ()) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            'statusCode': status_code,
            'message': message,
            'success': False,
            'errors': list(errors),
        },
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_envelope(exc.status_code, exc.message, exc.errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    message = detail if isinstance(detail, str) else 'Request failed'
    errors = [] if isinstance(detail, str) else [detail]
    response = error_envelope(exc.status_code, message, errors)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    ]
    return error_envelope(status.HTTP_400_BAD_REQUEST, 'Invalid request', errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return error_envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error')


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
