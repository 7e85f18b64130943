"""
Configuration resource loading.

This module locates a named configuration resource on the resource search
path and parses it into a Properties store. Properties, YAML and JSON
resources are supported.
"""

import json
import logging
import sys
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from ...core.exceptions import PropertiesParseError, ResourceNotFoundError
from .properties import Properties, dumps_properties, loads_properties

logger = logging.getLogger(__name__)

CONFIG_PATH = "botmill.properties"


class ConfigLoader:
    """
    Loader for configuration resources on a search path.

    The search path plays the role of a classpath. When no explicit path
    is given, the current working directory is searched first, then every
    directory on ``sys.path``.
    """

    def __init__(
        self,
        search_path: Optional[Iterable[Union[str, Path]]] = None,
        resource_package: Optional[str] = None
    ) -> None:
        self._search_path = [Path(p) for p in search_path] if search_path is not None else None
        self._resource_package = resource_package

    @property
    def search_path(self) -> List[Path]:
        """Get the directories searched for resources, in order."""
        if self._search_path is not None:
            return list(self._search_path)

        directories: List[Path] = [Path.cwd()]
        for entry in sys.path:
            path = Path(entry) if entry else Path.cwd()
            if path.is_dir() and path not in directories:
                directories.append(path)
        return directories

    def load(self, resource_name: str = CONFIG_PATH) -> Properties:
        """
        Load and parse a configuration resource.

        Args:
            resource_name: Resource name relative to the search path

        Returns:
            Parsed configuration store

        Raises:
            ResourceNotFoundError: If the resource is not on the search path
            PropertiesParseError: If the resource content is malformed
            OSError: If the resource cannot be read
        """
        content = self._read_resource(resource_name)
        suffix = Path(resource_name).suffix.lower()

        if suffix in ('.yaml', '.yml'):
            return self._load_yaml(content, resource_name)
        elif suffix == '.json':
            return self._load_json(content, resource_name)
        return self._load_properties(content, resource_name)

    def find(self, resource_name: str) -> Optional[Path]:
        """Find the first file named ``resource_name`` on the search path."""
        for directory in self.search_path:
            candidate = directory / resource_name
            if candidate.is_file():
                return candidate
        return None

    def save(self, properties: Properties, file_path: Union[str, Path],
             comments: Optional[str] = None) -> None:
        """Save a configuration store as a properties file."""
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(dumps_properties(properties, comments))
        except OSError as e:
            raise OSError(f"Error writing properties to {file_path}: {e}") from e

    def _read_resource(self, resource_name: str) -> bytes:
        """Read raw resource bytes from the package or the search path."""
        if self._resource_package:
            resource = resources.files(self._resource_package).joinpath(resource_name)
            if resource.is_file():
                logger.debug(f"Reading {resource_name} from package {self._resource_package}")
                return resource.read_bytes()

        path = self.find(resource_name)
        if path is None:
            search_path = [str(p) for p in self.search_path]
            if self._resource_package:
                search_path.insert(0, f"package:{self._resource_package}")
            raise ResourceNotFoundError(resource_name, search_path)

        logger.debug(f"Reading {resource_name} from {path}")
        with open(path, 'rb') as f:
            return f.read()

    def _load_properties(self, content: bytes, resource_name: str) -> Properties:
        """Parse properties content."""
        try:
            text = content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise PropertiesParseError(f"Invalid encoding in {resource_name}: {e}")
        return loads_properties(text)

    def _load_yaml(self, content: bytes, resource_name: str) -> Properties:
        """Parse YAML content into a flat store."""
        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise PropertiesParseError(f"Invalid YAML in {resource_name}: {e}")
        return self._to_properties(data, resource_name)

    def _load_json(self, content: bytes, resource_name: str) -> Properties:
        """Parse JSON content into a flat store."""
        try:
            data = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PropertiesParseError(f"Invalid JSON in {resource_name}: {e}")
        return self._to_properties(data, resource_name)

    def _to_properties(self, data: Any, resource_name: str) -> Properties:
        if not isinstance(data, dict):
            raise PropertiesParseError(
                f"Top level of {resource_name} must be a mapping, got {type(data).__name__}")

        properties = Properties()
        for key, value in self._flatten(data).items():
            properties[key] = value
        return properties

    def _flatten(self, data: Dict[Any, Any], prefix: str = "") -> Dict[str, str]:
        """Flatten nested mappings into dotted keys with string values."""
        result: Dict[str, str] = {}

        for key, value in data.items():
            full_key = f"{prefix}{key}"
            if isinstance(value, dict):
                result.update(self._flatten(value, f"{full_key}."))
            elif isinstance(value, list):
                result[full_key] = ",".join(self._stringify(item) for item in value)
            else:
                result[full_key] = self._stringify(value)

        return result

    def _stringify(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
