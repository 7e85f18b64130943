"""
Bot definition interface.

A bot definition is one pluggable chatbot behaviour module. Concrete
subclasses are discovered at startup, instantiated with no arguments and
asked to define their behaviour, typically by registering message handlers
with a platform adapter.
"""

from abc import ABC, abstractmethod
from typing import Any


class BotDefinition(ABC):
    """
    Interface for bot definitions.

    Subclasses register themselves with the default bot definition registry
    as soon as their class body has executed. Pass ``register=False`` in the
    class statement to opt out::

        class Draft(BotDefinition, register=False):
            ...
    """

    _botmill_register: bool = True

    def __init_subclass__(cls, register: bool = True, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._botmill_register = register
        if register:
            # Imported lazily, the registry module imports this one.
            from ...plugins.registry import default_registry
            default_registry.register(cls)

    @abstractmethod
    def define_behaviour(self) -> None:
        """
        Define the behaviour of this bot.

        Called exactly once per discovery run, right after construction.
        Implementations usually register handlers here.

        Raises:
            Exception: Any error aborts the discovery run.
        """
        pass
