"""Dependency names from repository config files."""

import json
import logging
import re
import tomllib
from typing import Any

logger = logging.getLogger(__name__)

# Leading distribution name of a requirement line or PEP 508 string
_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def _requirement_name(spec: str) -> str | None:
    match = _REQUIREMENT_NAME.match(spec)
    return match.group(1) if match else None


def parse_requirements(content: str) -> list[str]:
    """Package names from a ``requirements.txt``.

    Comments, blank lines and pip options (``-r``, ``-e``, ``--index-url``)
    are skipped; version specifiers, extras and markers are dropped.

    Examples:
        >>> parse_requirements("fastapi>=0.100\\n# dev\\nuvicorn[standard]==0.30")
        ['fastapi', 'uvicorn']
    """
    names = []
    for line in content.splitlines():
        line = line.split(" #", 1)[0].strip()
        if not line or line.startswith(("#", "-")):
            continue
        name = _requirement_name(line)
        if name:
            names.append(name)
    return names


def parse_pyproject_toml(content: str) -> list[str]:
    """Runtime dependency names from a ``pyproject.toml``.

    Reads PEP 621 ``[project] dependencies`` and Poetry's
    ``[tool.poetry.dependencies]`` table (without the ``python`` entry).
    Unparseable files yield an empty list.
    """
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Could not parse pyproject.toml: {e}")
        return []

    names: list[str] = []
    for spec in data.get("project", {}).get("dependencies", []) or []:
        name = _requirement_name(str(spec))
        if name:
            names.append(name)

    poetry: dict[str, Any] = data.get("tool", {}).get("poetry", {}).get("dependencies", {}) or {}
    names.extend(name for name in poetry if name.lower() != "python")
    return names


def parse_package_json(content: str) -> dict[str, list[str]]:
    """``dependencies`` and ``devDependencies`` names from a ``package.json``."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning(f"Could not parse package.json: {e}")
        return {}
    if not isinstance(data, dict):
        return {}

    result = {}
    for kind in ("dependencies", "devDependencies"):
        section = data.get(kind)
        if isinstance(section, dict) and section:
            result[kind] = list(section)
    return result
