"""
API Routers - FastAPI endpoint definitions.
"""

from chatline.presentation.api.users import router as users_router
from chatline.presentation.api.messages import router as messages_router
from chatline.presentation.api.realtime import router as realtime_router
from chatline.presentation.api.metrics import router as metrics_router

__all__ = [
    "users_router",
    "messages_router",
    "realtime_router",
    "metrics_router",
]
