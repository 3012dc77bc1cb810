"""Long polling delivery of updates."""

import asyncio
from typing import Optional

from ..core.exceptions import TransportError
from ..utils.logging import get_logger
from .client import TelegramClient
from .handlers import MessageHandler

logger = get_logger(__name__)


async def dispatch_update(handler: MessageHandler, update: dict) -> None:
    """Handle one update, logging failures instead of raising them."""
    try:
        await handler.handle_update(update)
    except TransportError as e:
        logger.error(
            f"An error has occurred in the dispatcher: {e}",
            extra={"update_id": update.get("update_id")},
        )
    except Exception:
        logger.exception(
            "Unexpected error while handling an update",
            extra={"update_id": update.get("update_id")},
        )


async def run_polling(
    client: TelegramClient,
    handler: MessageHandler,
    poll_timeout: int = 30,
    stop_event: Optional[asyncio.Event] = None,
    retry_delay: float = 5.0,
) -> None:
    """Fetch updates with ``getUpdates`` until ``stop_event`` is set."""
    await client.delete_webhook()
    logger.info("Webhook deleted")
    logger.info("Long polling mode activated")

    offset: Optional[int] = None
    while stop_event is None or not stop_event.is_set():
        try:
            updates = await client.get_updates(offset=offset, timeout=poll_timeout)
        except TransportError as e:
            logger.warning(f"An error from the update listener: {e}")
            await asyncio.sleep(retry_delay)
            continue
        for update in updates:
            offset = update["update_id"] + 1
            await dispatch_update(handler, update)
