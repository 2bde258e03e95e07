"""Locate and read ``timedef.toml``.

The nearest ``timedef.toml`` in the working directory or one of its
parents applies, unless ``TIMEDEF_CONFIG`` names a file explicitly.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from timedef.config.models import TimedefConfig

CONFIG_FILENAME = "timedef.toml"
CONFIG_ENV_VAR = "TIMEDEF_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Config file for a run started in *start* (default: cwd), or None.

    A ``TIMEDEF_CONFIG`` naming a missing file disables discovery.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Sparse overrides from *path*, checked against :class:`TimedefConfig`.

    Raises:
        ValueError: If the file is not TOML or holds unknown or bad values.
    """
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ValueError(msg) from exc
    try:
        TimedefConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid config in {path}: {exc.error_count()} error(s)\n{exc}"
        raise ValueError(msg) from exc
    return data
