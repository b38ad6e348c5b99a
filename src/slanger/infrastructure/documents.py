"""Document file I/O: JSON and YAML language definitions.

Returns plain mappings; coercion into the typed Document model happens
in the service layer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

JSON_SUFFIXES = frozenset({".json"})
YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class DocumentFileError(ValueError):
    """A document file is unreadable, unparsable, or not a mapping."""


def _new_yaml() -> YAML:
    """Create a fresh safe loader; YAML instances are stateful."""
    return YAML(typ="safe")


def read_document_data(path: Path) -> dict[str, Any]:
    """Read a JSON or YAML document file into a plain dict.

    Raises:
        DocumentFileError: Unknown suffix, parse failure, or a top-level
            value that is not a mapping.
    """
    suffix = path.suffix.lower()
    if suffix not in JSON_SUFFIXES | YAML_SUFFIXES:
        msg = f"Unsupported document format {suffix!r}: expected .json, .yaml or .yml"
        raise DocumentFileError(msg)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentFileError(f"Cannot read {path}: {exc}") from exc

    try:
        if suffix in JSON_SUFFIXES:
            data = json.loads(text)
        else:
            data = _new_yaml().load(text)
    except (json.JSONDecodeError, YAMLError) as exc:
        raise DocumentFileError(f"Cannot parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        msg = f"{path}: top-level value must be a mapping, got {type(data).__name__}"
        raise DocumentFileError(msg)
    return data


def write_document_data(path: Path, data: dict[str, Any]) -> None:
    """Write *data* as indented JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
