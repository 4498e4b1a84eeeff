"""
Configuration file support for hwt-kicad.

Provides hierarchical configuration loading from:
1. Project config: .hwt-kicad.toml or hwt-kicad.toml in the project root
2. User config: ~/.config/hwt-kicad/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from .exceptions import ConfigurationError
from .identifiers import ID_POLICIES, IdSource, make_id_source

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Config file names to search for in project directories
CONFIG_FILENAMES = [".hwt-kicad.toml", "hwt-kicad.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "hwt-kicad" / "config.toml"

OUTPUT_FORMATS = ("table", "json")

# All known config keys for validation
KNOWN_KEYS = {
    "defaults": {"format", "verbose", "quiet"},
    "import": {"id_policy", "strict", "sheet_name"},
}


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    format: str = "table"
    verbose: bool = False
    quiet: bool = False


@dataclass
class ImportConfig:
    """Importer options."""

    id_policy: str = "random"
    strict: bool = False
    sheet_name: str | None = None

    def make_id_source(self) -> IdSource:
        return make_id_source(self.id_policy)


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    import_: ImportConfig = field(default_factory=ImportConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            if user_data:
                _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load a single config file over the defaults."""
        config = cls()
        data = _load_toml_file(path)
        if data:
            _merge_config(config, data, str(path), config._sources)
        return config

    def section(self, name: str) -> Any:
        """Section object by its TOML name (``import`` maps to ``import_``)."""
        return self.import_ if name == "import" else getattr(self, name)

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")


class ConfigError(ConfigurationError):
    """Configuration file could not be loaded or holds an invalid value."""

    pass


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any] | None:
    """
    Load a TOML file.

    Returns:
        Parsed TOML data, or None when no TOML reader is installed

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML
    """
    if tomllib is None:
        warnings.warn(
            "tomli package not installed. Config file support requires 'pip install tomli' for Python < 3.11.",
            stacklevel=2,
        )
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", context={"file": str(path)}) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", context={"file": str(path)}) from e


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


# key -> (check, description of accepted values)
VALIDATORS: dict[str, tuple[Callable[[Any], bool], str]] = {
    "defaults.format": (lambda v: v in OUTPUT_FORMATS, " | ".join(OUTPUT_FORMATS)),
    "defaults.verbose": (_is_bool, "true | false"),
    "defaults.quiet": (_is_bool, "true | false"),
    "import.id_policy": (lambda v: v in ID_POLICIES, " | ".join(ID_POLICIES)),
    "import.strict": (_is_bool, "true | false"),
    "import.sheet_name": (_is_str, "a string"),
}


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into a Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info

    Raises:
        ConfigError: A known key has a value of the wrong type or range
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section_name, known in KNOWN_KEYS.items():
        section_data = data.get(section_name)
        if section_data is None:
            continue
        if not isinstance(section_data, dict):
            raise ConfigError(
                f"Config section [{section_name}] must be a table",
                context={"file": source},
            )
        _warn_unknown_keys(section_data, known, section_name, source)

        section = config.section(section_name)
        for key in sorted(known):
            if key not in section_data:
                continue
            dotted = f"{section_name}.{key}"
            value = section_data[key]
            check, accepted = VALIDATORS[dotted]
            if not check(value):
                raise ConfigError(
                    f"Invalid value for {dotted}: {value!r}",
                    context={"file": source, "expected": accepted},
                )
            setattr(section, key, value)
            sources[dotted] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# hwt-kicad configuration file
# Place as .hwt-kicad.toml in project root or ~/.config/hwt-kicad/config.toml for user defaults

[defaults]
# Output format: table, json
# format = "table"

# Enable verbose output by default
# verbose = false

# Enable quiet mode by default
# quiet = false

[import]
# Identifier policy for elements without a UUID: random, deterministic
# id_policy = "random"

# Fail on the first malformed element instead of skipping it
# strict = false

# Name given to imported schematic sheets (default: file name)
# sheet_name = "main"
"""


def get_config_paths(start_dir: Path | None = None) -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(start_dir or Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
