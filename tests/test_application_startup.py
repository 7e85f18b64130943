"""
Tests for application startup.

This module tests the ordered bootstrap sequence: configuration, logging,
discovery and activation.
"""

import sys
import textwrap
from pathlib import Path
from typing import Dict, Generator, Optional
from unittest.mock import Mock, patch

import pytest

from botmill import bootstrap
from botmill.application.startup import ApplicationStartup
from botmill.core.exceptions import BotMillConfigurationError
from botmill.infrastructure.config.loader import CONFIG_PATH, ConfigLoader
from botmill.infrastructure.config.manager import ConfigManager
from botmill.infrastructure.config.models import ApplicationConfig
from botmill.plugins.manager import BotDefinitionLoader
from botmill.plugins.registry import PLUGIN_MODULE_PREFIX, BotDefinitionRegistry, default_registry

BOT_SOURCE = textwrap.dedent("""
    from botmill import BotDefinition

    ACTIVATED = []


    class {name}(BotDefinition):
        def define_behaviour(self):
            ACTIVATED.append("{name}")
""")

BROKEN_SOURCE = textwrap.dedent("""
    from botmill import BotDefinition


    class {name}(BotDefinition):
        def define_behaviour(self):
            raise RuntimeError("{name} failed")
""")


@pytest.fixture(autouse=True)
def no_entry_points() -> Generator[None, None, None]:
    with patch("botmill.plugins.registry.entry_points", return_value=[]):
        yield


@pytest.fixture(autouse=True)
def restore_default_registry() -> Generator[None, None, None]:
    snapshot = default_registry.definitions()
    yield
    default_registry.clear()
    for definition in snapshot:
        default_registry.register(definition)


@pytest.fixture
def plugin_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "bots"
    directory.mkdir()
    (directory / "echo.py").write_text(BOT_SOURCE.format(name="EchoBot"))
    (directory / "weather.py").write_text(BOT_SOURCE.format(name="WeatherBot"))
    return directory


def make_startup(config_dir: Path, properties: str = "",
                 environ: Optional[Dict[str, str]] = None) -> ApplicationStartup:
    (config_dir / CONFIG_PATH).write_text(properties)
    manager = ConfigManager(ConfigLoader(search_path=[config_dir]))
    return ApplicationStartup(manager, BotDefinitionRegistry(), environ=environ or {})


class TestApplicationStartup:
    """Test cases for ApplicationStartup."""

    def test_configure_loads_store_and_settings(self, tmp_path: Path) -> None:
        startup = make_startup(tmp_path, "botmill.logging.level=DEBUG\nbot.name=echo\n")

        config = startup.configure(configure_logging=False)

        assert isinstance(config, ApplicationConfig)
        assert config.logging.level == "DEBUG"
        assert startup.config is config

    def test_configure_sets_up_logging(self, tmp_path: Path) -> None:
        startup = make_startup(tmp_path)

        with patch("botmill.application.startup.setup_logging") as mock_setup:
            config = startup.configure()

        mock_setup.assert_called_once_with(config.logging)

    def test_log_level_override(self, tmp_path: Path) -> None:
        startup = make_startup(tmp_path, "botmill.logging.level=INFO")

        config = startup.configure(log_level="warning", configure_logging=False)

        assert config.logging.level == "WARNING"

    def test_invalid_log_level_override(self, tmp_path: Path) -> None:
        startup = make_startup(tmp_path)

        with pytest.raises(ValueError):
            startup.configure(log_level="chatty", configure_logging=False)

    def test_missing_configuration_uses_defaults(self, tmp_path: Path) -> None:
        manager = ConfigManager(ConfigLoader(search_path=[tmp_path]))
        startup = ApplicationStartup(manager, BotDefinitionRegistry(), environ={})

        config = startup.configure(configure_logging=False)

        assert config == ApplicationConfig()

    def test_start_activates_configured_directories(self, tmp_path: Path, plugin_dir: Path) -> None:
        startup = make_startup(tmp_path, f"botmill.discovery.plugin_directories={plugin_dir.as_posix()}")

        report = startup.start(configure_logging=False)

        assert sorted(name.rsplit(".", 1)[-1] for name in report.loaded) == ["EchoBot", "WeatherBot"]

    def test_start_with_extra_directories(self, tmp_path: Path, plugin_dir: Path) -> None:
        startup = make_startup(tmp_path)

        report = startup.start(plugin_directories=[str(plugin_dir)], configure_logging=False)

        assert len(report.loaded) == 2

    def test_discover_order(self, tmp_path: Path) -> None:
        """Test entry points, then packages, then directories."""
        registry = Mock(spec=BotDefinitionRegistry)
        registry.load_entry_points.return_value = ["ep"]
        registry.scan_package.return_value = ["pkg"]
        registry.scan_directory.return_value = ["dir/file.py"]
        (tmp_path / CONFIG_PATH).write_text(
            "botmill.discovery.packages=configured.pkg\n"
            "botmill.discovery.entry_point_group=my.group\n")
        startup = ApplicationStartup(
            ConfigManager(ConfigLoader(search_path=[tmp_path])), registry, environ={})
        startup.configure(configure_logging=False)

        sources = startup.discover(packages=["extra.pkg"], plugin_directories=["extra_dir"])

        registry.load_entry_points.assert_called_once_with("my.group")
        assert [c.args[0] for c in registry.scan_package.call_args_list] == ["configured.pkg", "extra.pkg"]
        registry.scan_directory.assert_called_once_with("extra_dir")
        assert sources == ["ep", "pkg", "pkg", "dir/file.py"]

    def test_start_fails_fast_by_default(self, tmp_path: Path) -> None:
        plugins = tmp_path / "plugins"
        plugins.mkdir()
        (plugins / "a_broken.py").write_text(BROKEN_SOURCE.format(name="BrokenBot"))
        (plugins / "b_fine.py").write_text(BOT_SOURCE.format(name="FineBot"))
        startup = make_startup(tmp_path)

        with pytest.raises(BotMillConfigurationError) as exc_info:
            startup.start(plugin_directories=[str(plugins)], configure_logging=False)

        assert exc_info.value.errors == []
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_configured_collect_all_policy(self, tmp_path: Path) -> None:
        plugins = tmp_path / "plugins"
        plugins.mkdir()
        (plugins / "a_broken.py").write_text(BROKEN_SOURCE.format(name="BrokenBot"))
        (plugins / "b_broken.py").write_text(BROKEN_SOURCE.format(name="AlsoBrokenBot"))
        startup = make_startup(tmp_path, "botmill.discovery.fail_fast=false")

        with pytest.raises(BotMillConfigurationError) as exc_info:
            startup.start(plugin_directories=[str(plugins)], configure_logging=False)

        assert len(exc_info.value.errors) == 2

    def test_private_registry_still_self_registers_globally(self, tmp_path: Path) -> None:
        """Test imported subclasses reach the default registry as well."""
        plugins = tmp_path / "scoped"
        plugins.mkdir()
        (plugins / "scoped.py").write_text(BOT_SOURCE.format(name="ScopedBot"))
        startup = make_startup(tmp_path)

        report = startup.start(plugin_directories=[str(plugins)], configure_logging=False)

        scoped_name = f"{PLUGIN_MODULE_PREFIX}.scoped.scoped.ScopedBot"
        assert report.loaded == [scoped_name]
        assert scoped_name in default_registry

    def test_fail_fast_argument_overrides_configuration(self, tmp_path: Path) -> None:
        startup = make_startup(tmp_path, "botmill.discovery.fail_fast=true")

        with patch("botmill.application.startup.BotDefinitionLoader") as mock_loader_class:
            startup.start(fail_fast=False, configure_logging=False)

        mock_loader_class.return_value.load.assert_called_once_with(fail_fast=False)


class TestExamplePlugins:
    """Test cases for the bundled example plugins."""

    def test_echo_bot_registers_handler(self) -> None:
        example_dir = Path(__file__).resolve().parent.parent / "plugins"
        registry = BotDefinitionRegistry()

        registry.scan_directory(example_dir)
        report = BotDefinitionLoader(registry).load()

        module = sys.modules[f"{PLUGIN_MODULE_PREFIX}.plugins.echo_bot"]
        assert [name.rsplit(".", 1)[-1] for name in report.loaded] == ["EchoBot"]
        assert module.registered_commands() == ["/echo"]
        assert module.HANDLERS["/echo"]("hi") == "echo: hi"

    def test_echo_bot_reads_loaded_configuration(self, tmp_path: Path,
                                                 monkeypatch: pytest.MonkeyPatch) -> None:
        example_dir = Path(__file__).resolve().parent.parent / "plugins"
        (tmp_path / CONFIG_PATH).write_text("echo.prefix=bot says \n")
        monkeypatch.setattr(bootstrap, "_config_manager",
                            ConfigManager(ConfigLoader(search_path=[tmp_path])))

        startup = ApplicationStartup(registry=BotDefinitionRegistry(), environ={})
        startup.start(plugin_directories=[str(example_dir)], configure_logging=False)

        module = sys.modules[f"{PLUGIN_MODULE_PREFIX}.plugins.echo_bot"]
        assert bootstrap.get_configuration()["echo.prefix"] == "bot says "
        assert module.HANDLERS["/echo"]("hi") == "bot says hi"
