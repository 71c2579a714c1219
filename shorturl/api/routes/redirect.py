"""Short URL redirection endpoint."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.api import schemas
from shorturl.api.dependencies import get_shortener_service
from shorturl.api.params import parse_short_id
from shorturl.core.decorators import log_url_access_decorator
from shorturl.db.session import get_db
from shorturl.services.exceptions import InvalidShortIdError, URLLookupError
from shorturl.services.shortener import ShortenedURLService

router = APIRouter(tags=["redirect"])

INVALID_SHORT_URL = "Invalid short URL"
URL_NOT_FOUND = "url not found"
SERVER_ERROR = "Server error"


@router.get(
    "/shorturl/{short_id}",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    responses={
        200: {"model": schemas.ErrorResponse, "description": "No URL has this id"},
        400: {"model": schemas.ErrorResponse, "description": "The id is not a number"},
        500: {"model": schemas.ErrorResponse, "description": "The store failed"},
    },
    summary="Redirect to the original URL",
)
@log_url_access_decorator()
async def redirect_to_original_url(
    request: Request,
    short_id: str,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Redirect to the URL stored under ``short_id``."""
    try:
        parsed_id = parse_short_id(short_id)
    except InvalidShortIdError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=schemas.ErrorResponse(error=INVALID_SHORT_URL).model_dump(),
        )

    try:
        original_url = await shortener_service.resolve(db, parsed_id)
    except URLLookupError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=schemas.ErrorResponse(error=SERVER_ERROR).model_dump(),
        )

    if original_url is None:
        return JSONResponse(content=schemas.ErrorResponse(error=URL_NOT_FOUND).model_dump())

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
