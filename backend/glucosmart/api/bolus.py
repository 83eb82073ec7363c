import logging

from fastapi import APIRouter, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from glucosmart.api.errors import CORS_HEADERS, ErrorEnvelopeRoute, error_response, MethodNotAllowed
from glucosmart.models.bolus import BolusSuggestRequest
from glucosmart.services.bolus import BolusValidationError, calculate, field_errors_from_pydantic

logger = logging.getLogger(__name__)

PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

INVALID_BODY_ERROR = "El cuerpo de la solicitud debe ser un objeto JSON."
METHOD_NOT_ALLOWED_ERROR = "Método no permitido. Use POST."
INTERNAL_ERROR = "Error interno del servidor."


class BolusRoute(ErrorEnvelopeRoute):
    invalid_body_message = INVALID_BODY_ERROR
    internal_error_message = INTERNAL_ERROR

    def validation_message(self, exc: RequestValidationError) -> str:
        # FastAPI prefixes body errors with ("body", ...)
        errors = field_errors_from_pydantic(exc.errors(), loc_offset=1)
        if not errors:
            return self.invalid_body_message
        logger.info("Bolus request rejected: %s", ", ".join(e.field for e in errors))
        return errors[0].message


router = APIRouter(route_class=BolusRoute)


@router.options("/suggest", include_in_schema=False)
async def suggest_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=PREFLIGHT_HEADERS)


@router.post("/suggest", summary="Suggest a meal/correction bolus")
async def suggest(payload: BolusSuggestRequest) -> JSONResponse:
    try:
        result = calculate(payload)
    except BolusValidationError as exc:
        logger.info("Bolus request rejected: %s", ", ".join(exc.fields))
        return error_response(exc.first.message, status.HTTP_400_BAD_REQUEST)
    return JSONResponse(result.to_payload(), headers=CORS_HEADERS)


# Registered last: every verb the routes above do not take.
router.add_route("/suggest", MethodNotAllowed(METHOD_NOT_ALLOWED_ERROR), include_in_schema=False)
