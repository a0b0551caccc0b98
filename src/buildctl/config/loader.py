"""
Property file loading utilities.

This module handles the low-level loading and parsing of the files named by
``-propertyfile``. The parser is picked by file extension; nested tables are
flattened into dotted property names.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, TextIO

import yaml

from ..validation import ErrorSeverity, handle_file_error

logger = logging.getLogger(__name__)

PropertyParser = Callable[[Path], Mapping[str, Any]]


def _load_toml(path: Path) -> Mapping[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _load_json(path: Path) -> Mapping[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_properties(path: Path) -> Mapping[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_properties(f)


PROPERTY_PARSERS: Dict[str, PropertyParser] = {
    ".toml": _load_toml,
    ".json": _load_json,
    ".yaml": _load_yaml,
    ".yml": _load_yaml,
}
"""Mapping of file suffixes to parsers; anything else is a .properties file."""


def parse_properties(stream: TextIO) -> Dict[str, str]:
    """
    Parse Java-style ``key=value`` / ``key: value`` lines.

    Comment lines start with ``#``, ``!`` or ``;``. Section headers such as
    ``[main]`` are ignored. A trailing backslash continues the value on the
    next line.

    Args:
        stream: Text stream to read

    Returns:
        Parsed properties in file order
    """
    properties: Dict[str, str] = {}
    pending = ""

    for raw_line in stream:
        line = raw_line.strip()
        if pending:
            line = pending + line
            pending = ""
        if not line or line[0] in "#!;":
            continue
        if line.startswith("[") and line.endswith("]"):
            continue
        if line.endswith("\\"):
            pending = line[:-1]
            continue

        separators = [pos for pos in (line.find("="), line.find(":")) if pos > 0]
        if not separators:
            properties[line] = ""
            continue
        pos = min(separators)
        properties[line[:pos].strip()] = line[pos + 1:].strip()

    if pending:
        separators = [pos for pos in (pending.find("="), pending.find(":")) if pos > 0]
        if separators:
            pos = min(separators)
            properties[pending[:pos].strip()] = pending[pos + 1:].strip()

    return properties


def flatten_properties(data: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """
    Flatten nested mappings into dotted property names with string values.

    Examples:
        >>> flatten_properties({"db": {"host": "x", "port": 5432}})
        {'db.host': 'x', 'db.port': '5432'}
    """
    flat: Dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(flatten_properties(value, prefix=f"{name}."))
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        elif value is None:
            flat[name] = ""
        elif isinstance(value, (list, tuple)):
            flat[name] = ",".join(str(item) for item in value)
        else:
            flat[name] = str(value)
    return flat


def load_property_file(file_path: Path) -> Dict[str, str]:
    """
    Load a property file and return its flattened contents.

    Args:
        file_path: Path to the property file

    Returns:
        Mapping of property name to string value

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file cannot be parsed into a mapping
    """
    logger.debug(f"Loading property file from: {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"property file not found: {file_path}")

    parser = PROPERTY_PARSERS.get(file_path.suffix.lower(), _load_properties)
    try:
        data = parser(file_path)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"malformed property file {file_path}: {e}") from e

    if not isinstance(data, Mapping):
        raise ValueError(f"property file {file_path} must contain a mapping at the top level")

    return flatten_properties(data)


def load_property_files(
    paths,
    defined: Mapping[str, str],
    override: bool,
    report: Callable[[str], None],
) -> Dict[str, str]:
    """
    Merge property files into the command-line defined properties.

    Args:
        paths: Property files, in command-line order
        defined: Properties given with -D
        override: Whether file values replace values already defined
        report: Callback receiving a line for each file that could not be loaded

    Returns:
        The merged properties
    """
    merged: Dict[str, str] = dict(defined)
    for path in paths:
        try:
            loaded = load_property_file(Path(path))
        except (OSError, ValueError) as e:
            handle_file_error(
                error=e,
                context=f"loading property file {path}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            report(f"Could not load property file {path}: {e}")
            continue

        for name, value in loaded.items():
            if override or name not in defined:
                merged[name] = value
        logger.debug(f"Loaded {len(loaded)} properties from {path}")

    return merged
