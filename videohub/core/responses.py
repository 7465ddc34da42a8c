from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class ApiResponse:
    """Success envelope returned by every route."""

    def __init__(self, status_code: int, data: Any = None, message: str = 'Success') -> None:
        self.status_code = status_code
        self.data = data
        self.message = message
        self.success = status_code < 400

    def to_dict(self) -> dict:
        return {
            'statusCode': self.status_code,
            'data': jsonable_encoder(self.data),
            'message': self.message,
            'success': self.success,
        }

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.to_dict())
