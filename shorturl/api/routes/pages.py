"""Landing page."""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from shorturl.core.config import settings

router = APIRouter(tags=["pages"])


@router.get("/", include_in_schema=False)
async def index():
    return FileResponse(settings.resolve_path(settings.VIEWS_DIR) / "index.html")
