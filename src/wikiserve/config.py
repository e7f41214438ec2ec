"""Configuration management for wikiserve.

Supports TOML configuration format, looked up in a fixed search path.
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType

from wikiserve.log import parse_level

CONFIG_FILENAME = "config.toml"

DEFAULT_RENDERERS: dict[str, tuple[str, ...]] = {
    ".asciidoc": ("asciidoctor", "-"),
}


def config_search_path() -> list[Path]:
    """Directories searched for the configuration file, in order."""
    return [
        Path(os.path.expanduser("~")) / ".wikiserve",
        Path("/etc/wikiserve"),
    ]


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration."""

    binding: str = ":12522"
    cancel_on_disconnect: bool = True

    def address(self) -> tuple[str | None, int]:
        """Split the binding into host and port.

        An empty host means all interfaces and is returned as None.

        Returns:
            (host, port) tuple

        Raises:
            ValueError: If the binding is not a valid host:port pair
        """
        host, sep, port = self.binding.rpartition(":")
        if not sep:
            raise ValueError(f"server.binding must be host:port, got {self.binding!r}")
        try:
            port_number = int(port)
        except ValueError:
            raise ValueError(f"server.binding has an invalid port: {self.binding!r}") from None
        if not 0 <= port_number <= 65535:
            raise ValueError(f"server.binding port out of range: {self.binding!r}")
        host = host.strip("[]")
        return (host or None, port_number)


@dataclass(frozen=True)
class PagesConfig:
    """Pages configuration."""

    folder: str = "pages"
    root_dir: Path = field(default_factory=lambda: Path("."))

    @property
    def content_dir(self) -> Path:
        """Absolute directory that request paths are resolved against."""
        return (self.root_dir / self.folder).absolute()

    @property
    def mount(self) -> str:
        """URL prefix consumed by the router (e.g., "/pages")."""
        return f"/{self.folder}"


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = "notice"

    @property
    def numeric_level(self) -> int:
        return parse_level(self.level)


@dataclass(frozen=True)
class RenderConfig:
    """External renderer configuration."""

    extensions: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_RENDERERS)
    )
    timeout: float | None = 30.0

    def __post_init__(self) -> None:
        # read-only copy of the caller's mapping
        object.__setattr__(self, "extensions", MappingProxyType(dict(self.extensions)))


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    server: ServerConfig
    pages: PagesConfig
    logging: LoggingConfig
    render: RenderConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for config.toml in the configuration search path.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If no configuration file can be found
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            searched = ", ".join(str(d / CONFIG_FILENAME) for d in config_search_path())
            raise FileNotFoundError(f"Configuration file not found (searched: {searched})")

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in the configuration search path.

        Returns:
            Path to config file or None if not found
        """
        for directory in config_search_path():
            candidate = directory / CONFIG_FILENAME
            if candidate.is_file():
                return candidate
        return None

    @classmethod
    def default(cls) -> "Config":
        """Create config with all defaults."""
        return cls(
            server=ServerConfig(),
            pages=PagesConfig(),
            logging=LoggingConfig(),
            render=RenderConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            pages=cls._parse_pages(data.get("pages"), config_dir),
            logging=cls._parse_logging(data.get("logging")),
            render=cls._parse_render(data.get("render")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        binding = data.get("binding", ":12522")
        if not isinstance(binding, str):
            raise ValueError("server.binding must be a string")

        cancel_on_disconnect = data.get("cancel_on_disconnect", True)
        if not isinstance(cancel_on_disconnect, bool):
            raise ValueError("server.cancel_on_disconnect must be a boolean")

        server = ServerConfig(binding=binding, cancel_on_disconnect=cancel_on_disconnect)
        server.address()
        return server

    @classmethod
    def _parse_pages(cls, data: object, config_dir: Path) -> PagesConfig:
        """Parse pages configuration section.

        Without root_dir the pages folder is looked up in the working
        directory; an explicit root_dir is relative to the config file.

        Args:
            data: Raw pages section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            PagesConfig instance
        """
        if data is None:
            return PagesConfig()

        if not isinstance(data, dict):
            raise ValueError("pages section must be a dictionary")

        folder = data.get("folder", "pages")
        if not isinstance(folder, str):
            raise ValueError("pages.folder must be a string")
        folder = folder.strip("/")
        if not folder or "/" in folder or folder in (".", ".."):
            raise ValueError("pages.folder must be a single path segment")

        root_dir = data.get("root_dir")
        if root_dir is None:
            return PagesConfig(folder=folder)
        if not isinstance(root_dir, str):
            raise ValueError("pages.root_dir must be a string")

        return PagesConfig(folder=folder, root_dir=config_dir / root_dir)

    @classmethod
    def _parse_logging(cls, data: object) -> LoggingConfig:
        """Parse logging configuration section.

        Args:
            data: Raw logging section data

        Returns:
            LoggingConfig instance
        """
        if data is None:
            return LoggingConfig()

        if not isinstance(data, dict):
            raise ValueError("logging section must be a dictionary")

        level = data.get("level", "notice")
        if not isinstance(level, str):
            raise ValueError("logging.level must be a string")
        parse_level(level)

        return LoggingConfig(level=level)

    @classmethod
    def _parse_render(cls, data: object) -> RenderConfig:
        """Parse render configuration section.

        Args:
            data: Raw render section data

        Returns:
            RenderConfig instance
        """
        if data is None:
            return RenderConfig()

        if not isinstance(data, dict):
            raise ValueError("render section must be a dictionary")

        timeout_raw = data.get("timeout", 30.0)
        if isinstance(timeout_raw, bool) or not isinstance(timeout_raw, int | float):
            raise ValueError("render.timeout must be a number")
        if timeout_raw < 0:
            raise ValueError("render.timeout must not be negative")
        timeout = float(timeout_raw) if timeout_raw > 0 else None

        extensions_raw = data.get("extensions")
        if extensions_raw is None:
            return RenderConfig(timeout=timeout)
        if not isinstance(extensions_raw, dict):
            raise ValueError("render.extensions must be a dictionary")

        extensions: dict[str, tuple[str, ...]] = {}
        for extension, command in extensions_raw.items():
            if not extension.startswith("."):
                raise ValueError(f"render.extensions key {extension!r} must start with '.'")
            if not isinstance(command, list) or not command:
                raise ValueError(f"render.extensions.{extension} must be a non-empty list")
            for item in command:
                if not isinstance(item, str):
                    raise ValueError(f"render.extensions.{extension} items must be strings")
            extensions[extension] = tuple(command)

        return RenderConfig(extensions=extensions, timeout=timeout)

    def with_overrides(
        self,
        *,
        binding: str | None = None,
        root_dir: Path | None = None,
        log_level: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            binding: Override server.binding
            root_dir: Override pages.root_dir
            log_level: Override logging.level

        Returns:
            New Config instance with overrides applied

        Raises:
            ValueError: If an override is invalid
        """
        server = self.server
        if binding is not None:
            server = replace(self.server, binding=binding)
            server.address()

        pages = self.pages
        if root_dir is not None:
            pages = replace(self.pages, root_dir=root_dir)

        logging = self.logging
        if log_level is not None:
            parse_level(log_level)
            logging = replace(self.logging, level=log_level)

        return replace(self, server=server, pages=pages, logging=logging)
