from fastapi import APIRouter

from .endpoints import bot
from .endpoints import health
from .endpoints import page

api_router = APIRouter()

# Include endpoint routers
# Health (no prefix)
api_router.include_router(health.router, prefix="", tags=["health"])
api_router.include_router(bot.router, prefix="", tags=["bot"])

# Page is served from the site root, outside the API prefix
page_router = page.router
