"""Configuration loading.

Settings come from a YAML file. The file is located by, in order:
    1. an explicit path (``autoc --config``)
    2. the AUTOC_CONFIG environment variable
    3. ``autoc.yaml`` in the current directory

A missing default file is not an error; built-in defaults apply.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from autoc.lang.evaluator import EvalLimits

CONFIG_ENV_VAR = "AUTOC_CONFIG"
DEFAULT_CONFIG_NAME = "autoc.yaml"

DEFAULT_EXTENSIONS = [
    ".c", ".h", ".cc", ".cpp", ".cxx", ".hh", ".hpp",
    ".cs", ".java", ".js", ".ts", ".go", ".rs", ".swift",
    ".py", ".rb", ".sh", ".el", ".lua",
]
DEFAULT_EXCLUDE = [".git", ".hg", ".svn", "node_modules", "__pycache__", ".venv", "build", "dist"]


@dataclass
class AutocConfig:
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    max_iterations: int = 100_000
    max_call_depth: int = 64
    encoding: str = "utf-8"

    def limits(self) -> EvalLimits:
        return EvalLimits(
            max_iterations=self.max_iterations,
            max_call_depth=self.max_call_depth,
        )


def default_config_path() -> Path:
    """Return the config path from the environment, or ./autoc.yaml."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_NAME


def load_config(path: Path | str | None = None) -> AutocConfig:
    """Load settings from a YAML file.

    Args:
        path: Config file path. Defaults to ``default_config_path()``;
            a missing default file yields the built-in defaults.

    Returns:
        AutocConfig with file values applied over the defaults.

    Raises:
        FileNotFoundError: An explicitly given file does not exist.
        ValueError: The document is not a mapping, has unknown keys,
            or has values of the wrong type.
        yaml.YAMLError: The YAML is malformed.
    """
    explicit = path is not None
    config_path = Path(path) if explicit else default_config_path()
    if not explicit and not config_path.is_file():
        return AutocConfig()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return AutocConfig()
    if not isinstance(data, dict):
        raise ValueError(f"config at {config_path} is not a YAML mapping")

    known = {f.name for f in fields(AutocConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown config key(s) in {config_path}: {', '.join(unknown)}")

    for key in ("extensions", "exclude"):
        if key in data and not (
            isinstance(data[key], list) and all(isinstance(v, str) for v in data[key])
        ):
            raise ValueError(f"{config_path}: '{key}' must be a list of strings")
    for key in ("max_iterations", "max_call_depth"):
        if key in data and (
            isinstance(data[key], bool) or not isinstance(data[key], int) or data[key] < 1
        ):
            raise ValueError(f"{config_path}: '{key}' must be a positive integer")
    if "encoding" in data and not isinstance(data["encoding"], str):
        raise ValueError(f"{config_path}: 'encoding' must be a string")

    return AutocConfig(**data)
