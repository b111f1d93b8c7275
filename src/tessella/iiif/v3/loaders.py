"""
Loading ``info.json`` documents from disk.

Documents are read from local files only; fetching them from an image
server is left to the caller.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .models import ImageServiceInfo


def load_json(path: str | Path) -> dict[str, Any]:
    """
    Load JSON from a file path.

    Parameters:
        path: File path (``~`` is expanded)

    Returns:
        Parsed JSON as dictionary

    Raises:
        FileNotFoundError: If file path doesn't exist
        json.JSONDecodeError: If JSON is invalid
    """
    p = Path(path).expanduser()
    return json.loads(p.read_text(encoding="utf-8"))


def parse_info(data: dict[str, Any]) -> ImageServiceInfo:
    """
    Parse an ``info.json`` dict into the Pydantic model.

    Raises:
        pydantic.ValidationError: If JSON doesn't match the info.json schema

    Example:
        >>> info = parse_info(load_json("info.json"))
        >>> print(info.width, info.height)
    """
    return ImageServiceInfo.model_validate(data)


def load_info(path: str | Path) -> ImageServiceInfo:
    """
    Load and parse an ``info.json`` file.

    Combines load_json() and parse_info() in one call.

    Raises:
        FileNotFoundError: If file path doesn't exist
        json.JSONDecodeError: If JSON is invalid
        pydantic.ValidationError: If JSON doesn't match the info.json schema
    """
    return parse_info(load_json(path))
