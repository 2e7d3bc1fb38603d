from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger


def register_exception_handlers(app: FastAPI) -> None:
    """
    Error body is always `{"detail": ..., "code": ...}`; `code` is omitted
    for errors that have no machine-readable kind.
    """

    @app.exception_handler(CustomBaseError)
    async def handle_custom_error(request: Request, exc: CustomBaseError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Malformed ids and bodies are caller errors, not 422s
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={'detail': jsonable_encoder(exc.errors()), 'code': 'invalid_request'},
        )

    @app.exception_handler(ValueError)
    async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={'detail': str(exc), 'code': 'invalid_request'},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        Logger.base.exception(f'💥 Unhandled {type(exc).__name__} on {request.url.path}')
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'detail': 'Internal server error'},
        )
