"""Routing of incoming chat messages to commands and implicit search."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, NamedTuple, Optional

from ..core.exceptions import InvalidPattern
from ..core.models import SearchResult
from ..formatting.markdown import (
    invalid_pattern_message,
    nothing_found_message,
    render_documents,
    truncated_message,
)
from ..resolution.resolver import RequestResolver
from ..utils.logging import get_logger
from .client import TelegramClient
from .commands import ABOUT_TEXT, HELP_TEXT, Command, CommandKind, parse_command

logger = get_logger(__name__)


class Reply(NamedTuple):
    """A message to send back."""
    text: str
    parse_mode: Optional[str] = "MarkdownV2"


def _reply(text: str, markdown: bool = True) -> Reply:
    return Reply(text=text, parse_mode="MarkdownV2" if markdown else None)


class MessageHandler:
    """Decide how to answer a message and deliver the answer."""

    def __init__(
        self,
        resolver: RequestResolver,
        client: Optional[TelegramClient] = None,
        bot_name: Optional[str] = None,
    ) -> None:
        self.resolver = resolver
        self.client = client
        self.bot_name = bot_name

    def _result_replies(self, result: SearchResult) -> List[Reply]:
        if result.is_empty:
            return [_reply(nothing_found_message())]
        replies = [_reply(render_documents(result.documents))]
        if result.truncated:
            logger.info("Result is truncated", extra={"limit": self.resolver.limit})
            replies.append(_reply(truncated_message(self.resolver.limit)))
        return replies

    def _command_replies(self, command: Command) -> List[Reply]:
        if command.kind is CommandKind.HELP:
            return [_reply(HELP_TEXT, markdown=False)]
        if command.kind is CommandKind.ABOUT:
            return [_reply(ABOUT_TEXT, markdown=False)]
        try:
            result = self.resolver.resolve_explicit(command.argument or "")
        except InvalidPattern:
            return [_reply(invalid_pattern_message())]
        return self._result_replies(result)

    def replies_for(self, text: str) -> List[Reply]:
        """Compute the replies for one message text; empty means stay silent."""
        command = parse_command(text, self.bot_name)
        if command is not None:
            return self._command_replies(command)
        result = self.resolver.resolve_implicit(text)
        if result is None:
            return []
        return self._result_replies(result)

    async def handle_update(self, update: Dict[str, Any]) -> int:
        """Answer one Bot API update; returns the number of messages sent."""
        message = update.get("message")
        if not message or not message.get("text"):
            return 0
        replies = await asyncio.to_thread(self.replies_for, message["text"])
        if not replies:
            return 0
        if self.client is None:
            raise RuntimeError("MessageHandler has no TelegramClient to reply with")
        for reply in replies:
            await self.client.send_message(
                chat_id=message["chat"]["id"],
                text=reply.text,
                reply_to_message_id=message.get("message_id"),
                parse_mode=reply.parse_mode,
            )
        return len(replies)
