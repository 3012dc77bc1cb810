"""Bot commands and their parsing from message text."""

from enum import Enum
from typing import NamedTuple, Optional

HELP_TEXT = """Команды:
(инлайн-режим) - Просто напишите [Nxxxx|Pxxxx|PxxxxRx|Dxxxx|DxxxxRx|CWGxxx|EWGxxx|LWGxxx|LEWGxxx|FSxxx] в любом сообщении
/about - информация о боте
/search - поиск бумаги по её номеру, части названия или автору
/help - показать это сообщение"""

ABOUT_TEXT = (
    "Репозиторий бота: https://github.com/ZaMaZaN4iK/npaperbot-telegram . "
    "Там вы можете получить более подробную справку, оставить отчёт о проблеме или внести "
    "какое-либо предложение."
)


class CommandKind(Enum):
    HELP = "help"
    ABOUT = "about"
    SEARCH = "search"


class Command(NamedTuple):
    kind: CommandKind
    argument: str = ""


def parse_command(text: str, bot_name: Optional[str] = None) -> Optional[Command]:
    """Parse ``/name[@bot] args``; returns None for anything else.

    Commands addressed to a different bot are ignored.
    """
    if not text.startswith("/"):
        return None
    parts = text[1:].split(maxsplit=1)
    if not parts:
        return None
    argument = parts[1] if len(parts) > 1 else ""
    name, _, addressee = parts[0].partition("@")
    if addressee and bot_name and addressee.lower() != bot_name.lower():
        return None
    try:
        kind = CommandKind(name.lower())
    except ValueError:
        return None
    return Command(kind=kind, argument=argument.strip())
