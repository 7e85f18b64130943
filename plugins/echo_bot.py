"""
Echo Bot - an example bot definition.

Start BotMill with ``botmill start --plugin-dir plugins`` to activate it.
"""
import logging
from typing import Callable, Dict, List

from botmill import BotDefinition, get_configuration

logger = logging.getLogger(__name__)

# Handlers registered by define_behaviour, keyed by command
HANDLERS: Dict[str, Callable[[str], str]] = {}


class EchoBot(BotDefinition):
    """Replies with whatever it receives, prefixed as configured."""

    def __init__(self) -> None:
        self.prefix = get_configuration().get("echo.prefix", "echo: ")

    def define_behaviour(self) -> None:
        HANDLERS["/echo"] = self.reply
        logger.info(f"Echo bot ready with prefix {self.prefix!r}")

    def reply(self, text: str) -> str:
        return f"{self.prefix}{text}"


def registered_commands() -> List[str]:
    """List the commands registered so far."""
    return sorted(HANDLERS)
