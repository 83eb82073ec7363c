import logging
from typing import Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.types import Receive, Scope, Send

logger = logging.getLogger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def error_response(message: str, status_code: int, **headers: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers={**CORS_HEADERS, **headers})


class MethodNotAllowed:
    """
    ASGI endpoint answering with a 405 envelope.

    Mounted as a plain ASGI app (not a function) so Starlette leaves its
    method set empty and the route matches every verb, HEAD and TRACE included.
    """

    def __init__(self, message: str):
        self.message = message

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = error_response(self.message, status.HTTP_405_METHOD_NOT_ALLOWED, Allow="POST, OPTIONS")
        await response(scope, receive, send)


class ErrorEnvelopeRoute(APIRoute):
    """
    Route that answers failures as `{"error": ...}` instead of FastAPI's `{"detail": ...}`.

    Request validation errors become 400 with `validation_message(exc)`;
    anything unexpected is logged and becomes 500.
    """

    invalid_body_message = "Solicitud inválida"
    internal_error_message = "Error interno del servidor"

    def validation_message(self, exc: RequestValidationError) -> str:
        return self.invalid_body_message

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def envelope_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except RequestValidationError as exc:
                return error_response(self.validation_message(exc), status.HTTP_400_BAD_REQUEST)
            except HTTPException as exc:
                if exc.status_code == status.HTTP_400_BAD_REQUEST:
                    # body that could not be parsed at all
                    return error_response(self.invalid_body_message, exc.status_code)
                raise
            except Exception:
                logger.exception("Unexpected error on %s %s", request.method, request.url.path)
                return error_response(self.internal_error_message, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return envelope_route_handler
