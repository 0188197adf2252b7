"""Header display configuration for the import step."""
from fastapi import APIRouter, Depends

from csv_importer.config.settings import Settings, get_settings
from csv_importer.models import HeaderDisplay

router = APIRouter(prefix="/v2/header", tags=["Header"])


@router.get("", response_model=HeaderDisplay)
async def get_header(settings: Settings = Depends(get_settings)):
    return HeaderDisplay(
        icon_name=settings.header_icon_name,
        title_text=settings.header_title_text,
        logo_link=settings.header_logo_link,
    )
