"""FastAPI application receiving Telegram updates by webhook.

Telegram posts each update to ``/{token}/api/v1/message``; the token in
the path keeps the endpoint unguessable.  Updates are answered in a
background task so Telegram gets its ``200 OK`` immediately.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import JSONResponse

from ..catalog.store import CatalogStore
from ..refresh.scheduler import RefreshScheduler
from ..utils.logging import get_logger
from .handlers import MessageHandler
from .polling import dispatch_update

logger = get_logger(__name__)


def webhook_path(token: str) -> str:
    return f"/{token}/api/v1/message"


def create_app(
    handler: MessageHandler,
    token: str,
    store: Optional[CatalogStore] = None,
    scheduler: Optional[RefreshScheduler] = None,
) -> FastAPI:
    """Build the webhook application around ``handler``."""
    app = FastAPI(title="npaperbot", version="0.1.0")

    @app.post(webhook_path(token))
    async def telegram_update(request: Request, background_tasks: BackgroundTasks) -> JSONResponse:
        try:
            update: Dict[str, Any] = await request.json()
        except ValueError:
            logger.error("Cannot parse an update", extra={"body": (await request.body())[:256]})
            return JSONResponse({"ok": False})
        if not isinstance(update, dict):
            logger.error("Cannot parse an update", extra={"body_type": type(update).__name__})
            return JSONResponse({"ok": False})
        background_tasks.add_task(dispatch_update, handler, update)
        return JSONResponse({"ok": True})

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        status: Dict[str, Any] = {"status": "ok"}
        if store is not None:
            status["catalog_size"] = store.size()
        if scheduler is not None:
            status["refresh_state"] = scheduler.state.value
            status["last_refresh"] = scheduler.last_success.isoformat() if scheduler.last_success else None
            status["last_error"] = scheduler.last_error
        return status

    return app
