"""Short URL creation endpoint."""

from typing import Optional, Union

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.api import schemas
from shorturl.api.dependencies import get_shortener_service, get_url_validator
from shorturl.api.params import submitted_url
from shorturl.db.session import get_db
from shorturl.services.exceptions import InvalidURLError, URLCreationError
from shorturl.services.shortener import ShortenedURLService
from shorturl.services.validation import URLValidator

router = APIRouter(tags=["shortener"])

INVALID_URL = "invalid url"
SERVER_ERROR = "Server error"


@router.post(
    "/shorturl",
    response_model=Union[schemas.ShortURLResponse, schemas.ErrorResponse],
    status_code=status.HTTP_200_OK,
    responses={
        500: {"model": schemas.ErrorResponse, "description": "The store failed"}
    },
    summary="Shorten a URL",
)
@router.post("/shorturl/", include_in_schema=False)
async def create_short_url(
    url: Optional[str] = Depends(submitted_url),
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
    validator: URLValidator = Depends(get_url_validator),
):
    """
    Return the short id for the ``url`` body field, allocating one for new URLs.

    Rejected URLs answer ``200 {"error": "invalid url"}``.
    """
    try:
        await validator.validate(url)
    except InvalidURLError:
        return schemas.ErrorResponse(error=INVALID_URL)

    try:
        record = await shortener_service.get_or_create(db=db, original_url=url)
    except URLCreationError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=schemas.ErrorResponse(error=SERVER_ERROR).model_dump(),
        )

    return schemas.ShortURLResponse(
        original_url=record.original_url,
        short_url=record.short_id,
    )
