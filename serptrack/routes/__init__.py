from serptrack.routes.keywords import router as keywords_router
from serptrack.routes.settings import router as settings_router
from serptrack.routes.system import router as system_router

__all__ = [
    "keywords_router",
    "settings_router",
    "system_router"
]
