"""Configuration loader for libdef discovery and installation.

Reads settings from a JSON file (default: ``libdef-resolver.json`` in the
working directory) and validates it against ``SETTINGS_SCHEMA``. Every key is
optional; missing keys fall back to the defaults of :class:`Settings`.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

DEFAULT_CONFIG_FILE = "libdef-resolver.json"
CONFIG_PATH_ENV_VAR = "LIBDEF_RESOLVER_CONFIG"
DEFAULT_CACHE_DIR = Path.home() / ".libdef-resolver" / "repo"
DEFAULT_CACHE_REPO_URL = "https://github.com/flowtype/flow-typed.git"

SETTINGS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "toolName": {"type": "string", "pattern": "^[a-z][a-z0-9-]*$"},
        "definitionExtension": {"type": "string", "pattern": r"^(\.[A-Za-z0-9]+)+$"},
        "testFilePattern": {"type": "string", "minLength": 1},
        "ignoredSuffixes": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "builtinPackages": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "cacheRepoUrl": {"type": "string", "minLength": 1},
        "cacheDir": {"type": "string", "minLength": 1},
    },
}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Naming conventions and defaults shared by discovery and installation."""

    tool_name: str = "flow"
    definition_extension: str = ".js"
    test_file_pattern: str = r"^test_.*\.js$"
    ignored_suffixes: tuple[str, ...] = (".swp",)
    builtin_packages: tuple[str, ...] = ("react", "react-dom")
    cache_repo_url: str = DEFAULT_CACHE_REPO_URL
    cache_dir: Path = DEFAULT_CACHE_DIR

    def test_file_regex(self) -> re.Pattern[str]:
        return re.compile(self.test_file_pattern)

    def is_ignored(self, name: str) -> bool:
        return any(name.endswith(suffix) for suffix in self.ignored_suffixes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a schema-valid dictionary."""
        defaults = cls()
        pattern = data.get("testFilePattern", defaults.test_file_pattern)
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ConfigError(f"Invalid 'testFilePattern' regular expression: {exc}") from exc

        cache_dir = data.get("cacheDir")
        return cls(
            tool_name=data.get("toolName", defaults.tool_name),
            definition_extension=data.get("definitionExtension", defaults.definition_extension),
            test_file_pattern=pattern,
            ignored_suffixes=tuple(data.get("ignoredSuffixes", defaults.ignored_suffixes)),
            builtin_packages=tuple(data.get("builtinPackages", defaults.builtin_packages)),
            cache_repo_url=data.get("cacheRepoUrl", defaults.cache_repo_url),
            cache_dir=Path(cache_dir).expanduser() if cache_dir else defaults.cache_dir,
        )


def _resolve_config_path(path: Path | str | None = None) -> tuple[Path, bool]:
    """Resolve the configuration file path and whether it was asked for explicitly.

    Priority:
    1. Explicit path argument
    2. LIBDEF_RESOLVER_CONFIG environment variable
    3. libdef-resolver.json in the working directory
    """
    if path is not None:
        return Path(path), True

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path), True

    return Path.cwd() / DEFAULT_CONFIG_FILE, False


def _format_errors(errors: list[Any]) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings from a JSON file.

    An explicitly requested file must exist; when only the default location
    is consulted and nothing is there, the built-in defaults are returned.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path, explicit = _resolve_config_path(path)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return Settings()

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    validator = Draft202012Validator(SETTINGS_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{_format_errors(errors)}")

    return Settings.from_dict(data)
