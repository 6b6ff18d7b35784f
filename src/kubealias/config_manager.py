"""Configuration management module.

Loads generator settings from an optional TOML file (default:
./kubealias.toml) with environment variable overrides.

Example kubealias.toml:
    alias_prefix = "k"
    alias_file = "kubectl_aliases"
    doc_file = "README.md"
    priority_fallback = false

    [commands.rollout]
    priority = false
    modifiers = ["scope"]

Precedence: CLI option > environment > config file > defaults.
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from kubealias.catalog import DEFAULT_CATALOG, CatalogError, CommandCatalog, CommandSpec

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Fallback for Python 3.11+
    try:
        import tomllib as tomli  # type: ignore[import]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "kubealias.toml"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when configuration operations fail."""

    pass


@dataclass
class GeneratorConfig:
    """Alias generator configuration data."""

    cli_binary: str = "kubectl"
    alias_prefix: str = "k"
    alias_file: str = "kubectl_aliases"
    doc_file: str = "README.md"
    kubeconfig: str | None = None
    priority_fallback: bool = False
    discovery_timeout: float | None = None
    validation_workers: int = 20
    commands: dict[str, dict[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.cli_binary:
            raise ConfigError("cli_binary cannot be empty")
        if self.validation_workers < 1:
            raise ConfigError(
                f"validation_workers must be at least 1, got {self.validation_workers}"
            )
        if self.discovery_timeout is not None and self.discovery_timeout <= 0:
            raise ConfigError(
                f"discovery_timeout must be positive, got {self.discovery_timeout}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeneratorConfig":
        """Create from dictionary.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type
        """
        known = {f for f in cls.__dataclass_fields__}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        commands = data.get("commands", {})
        if not isinstance(commands, dict):
            raise ConfigError("[commands] must be a table")

        try:
            return cls(
                cli_binary=str(data.get("cli_binary", "kubectl")),
                alias_prefix=str(data.get("alias_prefix", "k")),
                alias_file=str(data.get("alias_file", "kubectl_aliases")),
                doc_file=str(data.get("doc_file", "README.md")),
                kubeconfig=_require_optional_str("kubeconfig", data.get("kubeconfig")),
                priority_fallback=_require_bool(
                    "priority_fallback", data.get("priority_fallback", False)
                ),
                discovery_timeout=(
                    float(data["discovery_timeout"])
                    if data.get("discovery_timeout") is not None
                    else None
                ),
                validation_workers=int(data.get("validation_workers", 20)),
                commands=commands,
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config value: {e}") from e

    def build_catalog(self, base: CommandCatalog = DEFAULT_CATALOG) -> CommandCatalog:
        """Return the base catalog extended with [commands.<name>] entries.

        Raises:
            ConfigError: If a command table is malformed
        """
        overrides = []
        for name, entry in self.commands.items():
            if not isinstance(entry, dict):
                raise ConfigError(f"[commands.{name}] must be a table")
            groups = entry.get("modifiers", [])
            if not isinstance(groups, list):
                raise ConfigError(f"[commands.{name}] modifiers must be a list of group names")
            try:
                overrides.append(
                    CommandSpec.with_groups(
                        name,
                        priority=_require_bool(
                            f"[commands.{name}] priority", entry.get("priority", False)
                        ),
                        groups=groups,
                    )
                )
            except CatalogError as e:
                raise ConfigError(str(e)) from e
        return base.merged(overrides)


def _require_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    return value


def _require_optional_str(name: str, value: Any) -> str | None:
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{name} must be a string, got {value!r}")
    return value


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{value}'")


# Environment variable -> (config key, converter)
ENV_OVERRIDES: dict[str, tuple[str, Any]] = {
    "KUBEALIAS_CLI_BINARY": ("cli_binary", str),
    "KUBEALIAS_ALIAS_PREFIX": ("alias_prefix", str),
    "KUBEALIAS_ALIAS_FILE": ("alias_file", str),
    "KUBEALIAS_DOC_FILE": ("doc_file", str),
    "KUBEALIAS_KUBECONFIG": ("kubeconfig", str),
    "KUBEALIAS_PRIORITY_FALLBACK": ("priority_fallback", None),
    "KUBEALIAS_DISCOVERY_TIMEOUT": ("discovery_timeout", float),
    "KUBEALIAS_VALIDATION_WORKERS": ("validation_workers", int),
}


class ConfigManager:
    """Load kubealias configuration."""

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Path to config file

        Raises:
            ConfigError: If a custom path was given and does not exist
        """
        if custom_path:
            path = Path(custom_path).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path
        return Path.cwd() / DEFAULT_CONFIG_FILE

    @classmethod
    def read_file(cls, custom_path: str | None = None) -> dict[str, Any]:
        """Read raw TOML data, or an empty dict if the default file is absent.

        Raises:
            ConfigError: If the file cannot be parsed
        """
        config_path = cls.get_config_path(custom_path)
        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return {}

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)  # type: ignore[attr-defined]
        except (OSError, tomli.TOMLDecodeError) as e:  # type: ignore[attr-defined]
            raise ConfigError(f"Failed to load config {config_path}: {e}") from e

        logger.debug(f"Loaded config from: {config_path}")
        return data

    @classmethod
    def apply_environment(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Overlay KUBEALIAS_* environment variables onto raw config data.

        Raises:
            ConfigError: If an environment value cannot be converted
        """
        merged = dict(data)
        for env_name, (key, converter) in ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if raw is None:
                continue
            try:
                merged[key] = _parse_bool(env_name, raw) if converter is None else converter(raw)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {env_name}: {raw}") from e
            logger.debug(f"Config override from environment: {env_name}")
        return merged

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> GeneratorConfig:
        """Load configuration from file and environment.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            GeneratorConfig object

        Raises:
            ConfigError: If loading fails
        """
        data = cls.apply_environment(cls.read_file(custom_path))
        return GeneratorConfig.from_dict(data)


__all__ = ["DEFAULT_CONFIG_FILE", "ConfigError", "ConfigManager", "GeneratorConfig"]
