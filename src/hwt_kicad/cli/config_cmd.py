"""
Config command for hwt-kicad.

Usage:
    hwt-kicad config --show          Show effective configuration with sources
    hwt-kicad config --init          Create template config file
    hwt-kicad config --paths         Show config file paths
"""

from __future__ import annotations

from pathlib import Path

from hwt_kicad.config import (
    CONFIG_FILENAMES,
    KNOWN_KEYS,
    USER_CONFIG_PATH,
    Config,
    generate_template,
    get_config_paths,
)


def run_config(args) -> int:
    """Dispatch the config actions; ``--show`` is the default."""
    if args.init:
        return _init_config(args.user)
    if args.paths:
        return _show_paths()
    return _show_config()


def _show_config() -> int:
    """Show effective configuration with sources."""
    config = Config.load()

    print("# Effective hwt-kicad configuration")
    for section_name, keys in KNOWN_KEYS.items():
        print()
        print(f"[{section_name}]")
        section = config.section(section_name)
        for key in sorted(keys):
            _print_value(key, getattr(section, key), config.get_source(f"{section_name}.{key}"))
    return 0


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    if isinstance(value, str):
        formatted = f'"{value}"'
    elif isinstance(value, bool):
        formatted = "true" if value else "false"
    elif value is None:
        formatted = "# not set"
    else:
        formatted = str(value)

    source_display = Path(source).name if source != "default" else source
    print(f"{key} = {formatted}  # from: {source_display}")


def _init_config(user: bool = False) -> int:
    """Write the template config file, refusing to overwrite."""
    target = USER_CONFIG_PATH if user else Path.cwd() / CONFIG_FILENAMES[0]
    if target.exists():
        print(f"Config file already exists: {target}")
        return 1
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(generate_template())
    print(f"Created config file: {target}")
    return 0


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print("Config file paths:")
    print()
    print(f"User config: {USER_CONFIG_PATH}")
    print("  Status: exists" if paths["user"] else "  Status: not found")
    print()
    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")
    return 0
