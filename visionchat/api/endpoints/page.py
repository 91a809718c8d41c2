"""
Chat page endpoint.

Serves the single-page chat widget with the contact address filled in.
"""
import html
from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from visionchat.config.settings import Settings, get_settings

PAGE_PATH = Path(__file__).resolve().parents[2] / "public" / "index.html"
CONTACT_PLACEHOLDER = "__CONTACT_EMAIL__"

router = APIRouter()


@lru_cache()
def load_page_template() -> str:
    return PAGE_PATH.read_text(encoding="utf-8")


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def chat_page(settings: Settings = Depends(get_settings)) -> HTMLResponse:
    """Render the chat page."""
    page = load_page_template().replace(
        CONTACT_PLACEHOLDER, html.escape(settings.contact_email, quote=True)
    )
    return HTMLResponse(page)
