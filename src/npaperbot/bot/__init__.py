"""Telegram transport for npaperbot.

Updates arrive either by long polling (``polling``) or by webhook
(``webhook``, a FastAPI application); both hand messages to
:class:`~npaperbot.bot.handlers.MessageHandler`.
"""
