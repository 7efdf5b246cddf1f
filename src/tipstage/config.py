"""Configuration management for Tipstage.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "tipstage.toml"


@dataclass
class ServerConfig:
    """Preview server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class DocsConfig:
    """Source and output locations."""

    source_dir: Path = field(default_factory=lambda: Path("tips"))
    output_dir: Path = field(default_factory=lambda: Path("_site"))


@dataclass
class TipsConfig:
    """Collection rules for tip documents."""

    permalink_prefix: str = "tips"
    order_width: int = 3
    include_unpublished: bool = False


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    docs: DocsConfig
    tips: TipsConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for tipstage.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(server=ServerConfig(), docs=DocsConfig(), tips=TipsConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
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
            docs=cls._parse_docs(data.get("docs"), config_dir),
            tips=cls._parse_tips(data.get("tips")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Args:
            data: Raw docs section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DocsConfig instance
        """
        if data is None:
            return DocsConfig(
                source_dir=config_dir / "tips",
                output_dir=config_dir / "_site",
            )

        if not isinstance(data, dict):
            raise ValueError("docs section must be a dictionary")

        source_dir = data.get("source_dir", "tips")
        if not isinstance(source_dir, str):
            raise ValueError("docs.source_dir must be a string")

        output_dir = data.get("output_dir", "_site")
        if not isinstance(output_dir, str):
            raise ValueError("docs.output_dir must be a string")

        return DocsConfig(
            source_dir=config_dir / source_dir,
            output_dir=config_dir / output_dir,
        )

    @classmethod
    def _parse_tips(cls, data: object) -> TipsConfig:
        """Parse tips configuration section.

        Args:
            data: Raw tips section data

        Returns:
            TipsConfig instance
        """
        if data is None:
            return TipsConfig()

        if not isinstance(data, dict):
            raise ValueError("tips section must be a dictionary")

        prefix = data.get("permalink_prefix", "tips")
        if not isinstance(prefix, str) or not prefix.strip("/"):
            raise ValueError("tips.permalink_prefix must be a non-empty string")

        order_width = data.get("order_width", 3)
        if not isinstance(order_width, int) or isinstance(order_width, bool):
            raise ValueError("tips.order_width must be an integer")
        if order_width < 1:
            raise ValueError("tips.order_width must be positive")

        include_unpublished = data.get("include_unpublished", False)
        if not isinstance(include_unpublished, bool):
            raise ValueError("tips.include_unpublished must be a boolean")

        return TipsConfig(
            permalink_prefix=prefix.strip("/"),
            order_width=order_width,
            include_unpublished=include_unpublished,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        output_dir: Path | None = None,
        include_unpublished: bool | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            source_dir: Override docs.source_dir
            output_dir: Override docs.output_dir
            include_unpublished: Override tips.include_unpublished

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        docs = self.docs
        if source_dir is not None or output_dir is not None:
            docs = replace(
                self.docs,
                source_dir=source_dir if source_dir is not None else self.docs.source_dir,
                output_dir=output_dir if output_dir is not None else self.docs.output_dir,
            )

        tips = self.tips
        if include_unpublished is not None:
            tips = replace(self.tips, include_unpublished=include_unpublished)

        return replace(self, server=server, docs=docs, tips=tips)
