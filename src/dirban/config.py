"""Settings for dirban: defaults, an optional YAML file, then DIRBAN_* env vars."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from dirban.constants import BOARDS_DIR, UPLOADS_DIR
from dirban.errors import ValidationError

ENV_PREFIX = "DIRBAN_"

DEFAULTS = {
    "root": "./data",
    "host": "localhost",
    "port": 3456,
    "max-upload-mb": 10,
    "log-level": "INFO",
    "debug": False,
}


def _python_key(key: str) -> str:
    """Convert file-style key (hyphenated) to Python-style (underscored)."""
    return key.replace("-", "_")


def _env_key(key: str) -> str:
    """Convert file-style key to its environment variable name."""
    return ENV_PREFIX + key.replace("-", "_").upper()


def _coerce(key: str, raw: Any) -> Any:
    """Type-coerce a raw value to the type of its default."""
    default = DEFAULTS[key]
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in ("true", "yes", "1")
    if isinstance(default, int):
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"{key} must be an integer, got {raw!r}")
    return str(raw)


@dataclass
class Settings:
    root: Path
    host: str = DEFAULTS["host"]
    port: int = DEFAULTS["port"]
    max_upload_mb: int = DEFAULTS["max-upload-mb"]
    log_level: str = DEFAULTS["log-level"]
    debug: bool = DEFAULTS["debug"]

    @property
    def boards_root(self) -> Path:
        return self.root / BOARDS_DIR

    @property
    def uploads_root(self) -> Path:
        return self.root / UPLOADS_DIR

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML settings file into {key: value}, ignoring unknown keys."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"Config file {path} must be a mapping")
    return {k.replace("_", "-"): v for k, v in data.items() if k.replace("_", "-") in DEFAULTS}


def read_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> Settings:
    """Build Settings from defaults, a config file, the environment and overrides.

    Later sources win. Overrides use Python-style keys and None means
    "not given", so argparse namespaces can be passed straight through.
    """
    environ = os.environ if environ is None else environ
    values: dict[str, Any] = dict(DEFAULTS)

    if path is not None:
        values.update(read_config_file(path))

    for key in DEFAULTS:
        env = environ.get(_env_key(key))
        if env is not None and env != "":
            values[key] = env

    for py_key, value in overrides.items():
        key = py_key.replace("_", "-")
        if key in DEFAULTS and value is not None:
            values[key] = value

    coerced = {_python_key(k): _coerce(k, v) for k, v in values.items()}
    coerced["root"] = Path(coerced["root"]).expanduser().resolve()
    coerced["log_level"] = coerced["log_level"].upper()
    return Settings(**coerced)
