"""
Bot definition loading.

This module activates registered bot definitions: each concrete definition
is constructed with no arguments and asked to define its behaviour.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..core.exceptions import BotMillConfigurationError
from ..core.interfaces.bots import BotDefinition
from .registry import BotDefinitionRegistry, default_registry, qualified_name

logger = logging.getLogger(__name__)

BOT_DEFINITION_NAME = qualified_name(BotDefinition)


@dataclass
class LoadReport:
    """Outcome of a bot definition loading run."""
    loaded: List[str] = field(default_factory=list)
    skipped_abstract: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of definitions examined."""
        return len(self.loaded) + len(self.skipped_abstract) + len(self.failed)


class BotDefinitionLoader:
    """
    Loader that activates every concrete bot definition in a registry.

    Instances are not retained after ``define_behaviour()`` returns.
    """

    def __init__(self, registry: Optional[BotDefinitionRegistry] = None) -> None:
        self._registry = registry if registry is not None else default_registry

    @property
    def registry(self) -> BotDefinitionRegistry:
        """Get the registry this loader reads from."""
        return self._registry

    def load(self, fail_fast: bool = True) -> LoadReport:
        """
        Instantiate each concrete definition and define its behaviour.

        Abstract definitions are skipped. An empty registry is logged as a
        warning and is not an error.

        Args:
            fail_fast: Stop at the first failure. When false, every definition
                is attempted and the failures are raised together at the end.

        Returns:
            Report of loaded and skipped definitions

        Raises:
            BotMillConfigurationError: If any definition fails to activate
        """
        report = LoadReport()
        definitions = self._registry.definitions()

        if not definitions:
            logger.warning(
                "No bot definition found. Make sure to have at least one class "
                f"implementing {BOT_DEFINITION_NAME}.")
            return report

        errors: List[BotMillConfigurationError] = []
        for definition in definitions:
            name = qualified_name(definition)

            if self._is_abstract(definition):
                logger.debug(f"Skipping abstract bot definition: {name}")
                report.skipped_abstract.append(name)
                continue

            try:
                self._activate(definition)
            except BotMillConfigurationError as e:
                if fail_fast:
                    raise
                report.failed.append(name)
                errors.append(e)
                continue

            report.loaded.append(name)

        if errors:
            summary = "; ".join(str(e) for e in errors)
            raise BotMillConfigurationError(
                f"{len(errors)} bot definition(s) failed to load: {summary}",
                errors=errors) from errors[0]

        logger.info(
            f"Loaded {len(report.loaded)} bot definitions "
            f"({len(report.skipped_abstract)} abstract skipped)")
        return report

    def _is_abstract(self, definition: Any) -> bool:
        return (isinstance(definition, type)
                and issubclass(definition, BotDefinition)
                and inspect.isabstract(definition))

    def _activate(self, definition: Any) -> None:
        """Construct a definition and call ``define_behaviour()`` on it."""
        if not (isinstance(definition, type) and issubclass(definition, BotDefinition)):
            logger.error(f"Class [{definition!r}] does not implement {BOT_DEFINITION_NAME}.")
            raise BotMillConfigurationError(
                f"Class [ {definition!r} ] does not implement {BOT_DEFINITION_NAME}.",
                bot_class=definition
            ) from TypeError(f"{definition!r} is not a subclass of {BOT_DEFINITION_NAME}")

        name = qualified_name(definition)
        try:
            instance = definition()
        except Exception as e:
            logger.exception(f"Error during instantiation of class [{name}].")
            raise BotMillConfigurationError(
                f"Error during instantiation of class [ {name} ].",
                bot_class=definition) from e

        try:
            instance.define_behaviour()
        except Exception as e:
            logger.exception(f"Error while defining behaviour of class [{name}].")
            raise BotMillConfigurationError(
                f"Error while defining behaviour of class [ {name} ].",
                bot_class=definition) from e

        logger.debug(f"Defined behaviour of bot: {name}")
