import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from glucosmart.api.errors import CORS_HEADERS, ErrorEnvelopeRoute, error_response, MethodNotAllowed
from glucosmart.core.constants import SHARE_LINKS_FILENAME
from glucosmart.core.datastore import ShareLinkStore
from glucosmart.core.settings import Settings, get_settings
from glucosmart.models.share import ShareLinkCreated, ShareLinkRequest, ShareLinkView
from glucosmart.services.share_links import ShareLinkExpired, ShareLinkNotFound, ShareLinkService

logger = logging.getLogger(__name__)

PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class ShareRoute(ErrorEnvelopeRoute):
    invalid_body_message = 'Datos inválidos: se requiere un objeto "data"'
    internal_error_message = "Error interno del servidor"


router = APIRouter(route_class=ShareRoute)


def get_share_link_store(settings: Settings = Depends(get_settings)) -> ShareLinkStore:
    return ShareLinkStore(Path(settings.data.data_dir) / SHARE_LINKS_FILENAME)


def get_share_link_service(
    settings: Settings = Depends(get_settings),
    store: ShareLinkStore = Depends(get_share_link_store),
) -> ShareLinkService:
    return ShareLinkService(
        store=store,
        public_base_url=settings.share.public_base_url,
        ttl_hours=settings.share.ttl_hours,
    )


@router.options("/share", include_in_schema=False)
async def share_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=PREFLIGHT_HEADERS)


@router.post("/share", summary="Create a temporary share link")
async def create_share_link(
    payload: ShareLinkRequest,
    service: ShareLinkService = Depends(get_share_link_service),
) -> JSONResponse:
    link, url = service.create(payload.data)
    created = ShareLinkCreated(short_link=url, id=link.id, expires_at=link.expires_at)
    return JSONResponse(created.model_dump(mode="json", by_alias=True), headers=CORS_HEADERS)


router.add_route("/share", MethodNotAllowed("Método no permitido"), include_in_schema=False)


@router.get("/share/{link_id}", summary="Resolve a share link")
async def resolve_share_link(
    link_id: str,
    service: ShareLinkService = Depends(get_share_link_service),
) -> JSONResponse:
    try:
        link = service.resolve(link_id)
    except ShareLinkNotFound:
        return error_response("Enlace no encontrado", status.HTTP_404_NOT_FOUND)
    except ShareLinkExpired:
        return error_response("Enlace expirado", status.HTTP_410_GONE)

    view = ShareLinkView.model_validate(link.model_dump())
    return JSONResponse(view.model_dump(mode="json"), headers=CORS_HEADERS)
