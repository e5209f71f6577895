"""
Settings for the runner tools.

Defaults ship inside the package (config/default_config.json). A project can
override any of them with a .runner-tools.json in the directory the tool is
run from. Both files are checked before use: a file that is not valid JSON,
or a value the tools cannot use, raises ConfigError.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..checks.version import parse_version

PROJECT_CONFIG_NAME = ".runner-tools.json"
PACKAGE_DIR = Path(__file__).resolve().parent.parent


class ConfigError(Exception):
    """A settings file could not be read or holds an unusable value."""


def default_config_path(root: Optional[str] = None) -> Path:
    base = Path(root) if root else PACKAGE_DIR
    return base / "config" / "default_config.json"


def load_config(cwd: str, root: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the shipped defaults and merge the project override on top.

    Args:
        cwd: Directory searched for .runner-tools.json
        root: Directory holding config/default_config.json; defaults to
            the installed package

    Returns:
        The merged, validated settings

    Raises:
        ConfigError: A file is malformed or a value has the wrong type
    """
    config: Dict[str, Any] = {}

    default_path = default_config_path(root)
    if default_path.exists():
        config = read_config_file(default_path)

    project_path = Path(cwd) / PROJECT_CONFIG_NAME
    if project_path.exists():
        config = deep_merge(config, read_config_file(project_path))

    validate_config(config)
    return config


def read_config_file(path: Path) -> Dict[str, Any]:
    """Parse one settings file, which must hold a JSON object."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"{path}: invalid JSON (line {e.lineno}, column {e.colno}): {e.msg}"
        ) from e
    except OSError as e:
        raise ConfigError(f"{path}: {e.strerror or e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base, descending into nested objects."""
    result = base.copy()

    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def get_config_value(config: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Get nested config value by key path."""
    current = config

    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default

    return current


# ============================================================================
# Validation
# ============================================================================


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_positive_number(value: Any) -> bool:
    # bool is a subclass of int
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def _is_version(value: Any) -> bool:
    return isinstance(value, str) and parse_version(value) is not None


def _is_flag(value: Any) -> bool:
    return isinstance(value, bool)


RULES: List[Tuple[Tuple[str, ...], Callable[[Any], bool], str]] = [
    (("debug",), _is_flag, "true or false"),
    (("log_file",), _is_flag, "true or false"),
    (("sdk", "command"), _is_text, "a command name"),
    (("sdk", "minimum_version"), _is_version, "a version like 6.0 or 8.0.100"),
    (("sdk", "template"), _is_text, "a template name"),
    (("sdk", "project_name"), _is_text, "a project name"),
    (("sdk", "project_extension"), _is_text, "a file extension"),
    (("sdk", "timeout"), _is_positive_number, "a positive number of seconds"),
    (("image", "engine"), _is_text, "a command name"),
    (("image", "name"), _is_text, "an image name"),
    (("image", "dockerfile"), _is_text, "a file path"),
    (("image", "context"), _is_text, "a directory path"),
]


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check every known key that is present.

    Unknown keys are left alone. The first bad value raises ConfigError
    naming the dotted key, the offending value and what was expected.
    """
    for section in ("sdk", "image"):
        if section in config and not isinstance(config[section], dict):
            raise ConfigError(f"'{section}' must be an object")

    missing = object()
    for keys, check, wanted in RULES:
        value = get_config_value(config, *keys, default=missing)
        if value is missing:
            continue
        if not check(value):
            raise ConfigError(
                f"'{'.'.join(keys)}' is {json.dumps(value)}; expected {wanted}"
            )
