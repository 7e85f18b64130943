"""
Bot definition registry and discovery sources.

Bot definitions reach the registry in one of three ways: subclasses of
BotDefinition register themselves when their class body runs, installed
distributions advertise them through entry points, and packages or plugin
directories can be scanned explicitly.
"""

import importlib
import importlib.util
import logging
import pkgutil
import sys
from importlib.metadata import entry_points
from pathlib import Path
from typing import Any, Dict, Iterator, List, Union

from ..core.exceptions import BotMillConfigurationError
from ..core.interfaces.bots import BotDefinition
from ..infrastructure.config.models import DEFAULT_ENTRY_POINT_GROUP

logger = logging.getLogger(__name__)

PLUGIN_MODULE_PREFIX = "botmill_plugins"


def qualified_name(obj: Any) -> str:
    """Get the dotted ``module.QualName`` of a registered object."""
    module = getattr(obj, "__module__", None) or "<unknown>"
    name = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None) or repr(obj)
    return f"{module}.{name}"


class BotDefinitionRegistry:
    """
    Registry of bot definition types.

    Entries are keyed by qualified name, so re-importing a module replaces
    its classes instead of duplicating them. Iteration follows registration
    order. Nothing is checked at registration time; the loader validates
    entries when it activates them.
    """

    def __init__(self) -> None:
        self._definitions: Dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._definitions.values()))

    def __contains__(self, item: Any) -> bool:
        if isinstance(item, str):
            return item in self._definitions
        return self._definitions.get(qualified_name(item)) is item

    def register(self, definition: Any) -> Any:
        """
        Register a bot definition type.

        Returns the definition unchanged so this can be used as a class
        decorator.
        """
        name = qualified_name(definition)
        if name in self._definitions and self._definitions[name] is not definition:
            logger.debug(f"Replacing bot definition: {name}")
        self._definitions[name] = definition
        logger.debug(f"Registered bot definition: {name}")
        return definition

    def unregister(self, definition: Any) -> bool:
        """Remove a definition by object or qualified name."""
        name = definition if isinstance(definition, str) else qualified_name(definition)
        return self._definitions.pop(name, None) is not None

    def clear(self) -> None:
        """Remove all registered definitions."""
        self._definitions.clear()

    def definitions(self) -> List[Any]:
        """Get all registered definitions in registration order."""
        return list(self._definitions.values())

    def load_entry_points(self, group: str = DEFAULT_ENTRY_POINT_GROUP) -> List[str]:
        """
        Register every object advertised in an entry point group.

        Args:
            group: Entry point group name

        Returns:
            Names of the entry points that were loaded

        Raises:
            BotMillConfigurationError: If an entry point cannot be loaded
        """
        loaded: List[str] = []

        for entry_point in entry_points(group=group):
            try:
                definition = entry_point.load()
            except Exception as e:
                logger.exception(f"Failed to load entry point {entry_point.name} ({entry_point.value})")
                raise BotMillConfigurationError(
                    f"Failed to load entry point [ {entry_point.name} = {entry_point.value} ].") from e

            self.register(definition)
            loaded.append(entry_point.name)

        logger.info(f"Loaded {len(loaded)} entry points from group {group}")
        return loaded

    def scan_package(self, package_name: str) -> List[str]:
        """
        Import a package and all of its submodules.

        BotDefinition subclasses defined in the imported modules are
        registered here as well as with the default registry.

        Returns:
            Names of the imported modules

        Raises:
            BotMillConfigurationError: If any module fails to import
        """
        imported: List[str] = []

        package = self._import_module(package_name)
        self._register_module_definitions(package)
        imported.append(package_name)

        package_path = getattr(package, "__path__", None)
        if package_path is None:
            return imported

        def on_error(name: str) -> None:
            # Called from inside walk_packages' except block
            logger.exception(f"Failed to import module {name}")
            raise BotMillConfigurationError(
                f"Failed to import module [ {name} ].") from sys.exc_info()[1]

        for module_info in pkgutil.walk_packages(package_path, prefix=f"{package_name}.", onerror=on_error):
            self._register_module_definitions(self._import_module(module_info.name))
            imported.append(module_info.name)

        logger.info(f"Scanned {len(imported)} modules in package {package_name}")
        return imported

    def scan_directory(self, directory: Union[str, Path]) -> List[str]:
        """
        Import every Python file under a plugin directory.

        Files whose names start with ``__`` are skipped. A missing directory
        is logged and yields no modules.

        Returns:
            Paths of the imported files

        Raises:
            BotMillConfigurationError: If any file fails to import
        """
        plugin_dir = Path(directory)
        plugin_paths: List[str] = []

        if not plugin_dir.is_dir():
            logger.warning(f"Plugin directory does not exist: {directory}")
            return plugin_paths

        for file_path in sorted(plugin_dir.rglob("*.py")):
            if file_path.name.startswith("__"):
                continue

            self._register_module_definitions(self._load_plugin_module(file_path, plugin_dir))
            plugin_paths.append(str(file_path))

        logger.info(f"Imported {len(plugin_paths)} plugin modules from {directory}")
        return plugin_paths

    def _import_module(self, module_name: str) -> Any:
        try:
            return importlib.import_module(module_name)
        except Exception as e:
            logger.exception(f"Failed to import module {module_name}")
            raise BotMillConfigurationError(
                f"Failed to import module [ {module_name} ].") from e

    def _load_plugin_module(self, file_path: Path, root: Path) -> Any:
        """Load a plugin module from file."""
        relative = file_path.relative_to(root).with_suffix("")
        module_name = ".".join((PLUGIN_MODULE_PREFIX, root.name or "root", *relative.parts))

        spec = importlib.util.spec_from_file_location(module_name, file_path)
        if not spec or not spec.loader:
            raise BotMillConfigurationError(f"Cannot load plugin from [ {file_path} ].")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            logger.exception(f"Failed to load plugin from {file_path}")
            raise BotMillConfigurationError(
                f"Failed to load plugin from [ {file_path} ].") from e

        return module

    def _register_module_definitions(self, module: Any) -> None:
        """Register the BotDefinition subclasses defined in a module."""
        for value in list(vars(module).values()):
            if (isinstance(value, type)
                    and issubclass(value, BotDefinition)
                    and value is not BotDefinition
                    and value.__module__ == module.__name__
                    and value.__dict__.get("_botmill_register", True)):
                self.register(value)


default_registry = BotDefinitionRegistry()
