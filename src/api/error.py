"""API error contract

Use case errors are raised as ClientError and rendered as
``{"error": {"code", "message", "reason"}}``.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error.model_dump(exclude_none=True)},
    )


STATUS_BY_CODE = {
    "INSUFFICIENT_STOCK": status.HTTP_409_CONFLICT,
    "OUT_OF_STOCK": status.HTTP_409_CONFLICT,
    "PRODUCT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SALE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "LINE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "EXCESSIVE_RETURN_QUANTITY": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_PAYMENT_AMOUNT": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "MISSING_CUSTOMER_INFO": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_PHONE_FORMAT": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "MISSING_PAYMENT_REFERENCE": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_QUANTITY": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "EMPTY_CART": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def error_for(error: Error) -> ClientError:
    """Map a use case error to its HTTP status"""
    if error.code in STATUS_BY_CODE:
        return ClientError(error, status_code=STATUS_BY_CODE[error.code])
    if error.code.endswith("_FAILED"):
        return ClientError(error, status_code=status.HTTP_502_BAD_GATEWAY)
    return ClientError(error)
