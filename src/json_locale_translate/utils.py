"""Utility functions for json-locale-translate."""

from __future__ import annotations

import json
from pathlib import Path

from .errors import ConfigError

LAYOUT_DIR = "dir"
LAYOUT_FLAT = "flat"
LAYOUTS = (LAYOUT_DIR, LAYOUT_FLAT)

CONTEXT_FILE_NAME = "translation-context.json"


def detect_target_locales(directory: Path, base_locale: str, layout: str = LAYOUT_DIR, name: str = "common") -> list[str]:
    """
    Detect target locales already present in a locales directory.

    With the ``dir`` layout every subdirectory holding ``<name>.json`` is a
    locale (``locales/de/common.json``). With the ``flat`` layout every
    ``*.json`` file directly in the directory is one (``locales/de.json``),
    except the context file.

    Args:
        directory: Path to the locales directory
        base_locale: The base locale code to exclude (e.g., 'en')
        layout: 'dir' or 'flat'
        name: Bundle file name without extension, for the 'dir' layout

    Returns:
        Sorted list of target locale codes found (e.g., ['de', 'es', 'fr'])
    """
    if not directory.is_dir():
        raise ValueError(f"Directory does not exist: {directory}")
    if layout not in LAYOUTS:
        raise ValueError(f"Unknown layout: {layout}")

    locales = []
    if layout == LAYOUT_DIR:
        for child in directory.iterdir():
            if child.is_dir() and child.name != base_locale and (child / f"{name}.json").exists():
                locales.append(child.name)
    else:
        excluded = {base_locale, Path(CONTEXT_FILE_NAME).stem}
        for json_file in directory.glob("*.json"):
            if json_file.stem not in excluded:
                locales.append(json_file.stem)

    return sorted(locales)


def load_context(path: Path | None) -> str:
    """
    Build the prompt context from a JSON file.

    The file is an object with an optional ``instructions`` string and an
    optional ``glossary`` mapping terms to what they mean here::

        {"instructions": "A B2B dashboard.", "glossary": {"workspace": "a customer account"}}

    Args:
        path: Path to the context JSON file, or None for no context

    Returns:
        Context text for the system prompt ("" when path is None)

    Raises:
        ConfigError: The file is missing, unreadable, not JSON, or has the wrong shape
    """
    if path is None:
        return ""

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Context file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Context file is not valid JSON: {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading context file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Context file must contain a JSON object: {path}")

    instructions = data.get("instructions")
    glossary = data.get("glossary", {})
    if instructions is not None and not isinstance(instructions, str):
        raise ConfigError(f"'instructions' in {path} must be a string")
    if not isinstance(glossary, dict):
        raise ConfigError(f"'glossary' in {path} must be an object of term: meaning pairs")

    parts = []
    if instructions:
        parts += ["**Contextual Information**:", instructions]
    if glossary:
        parts.append("\n**Glossary**:")
        parts += [f'- "{term}" refers to {meaning}' for term, meaning in glossary.items()]
    return "\n".join(parts)


# Checked in order; bool first because it is a subclass of int.
_SCALAR_TYPES = ((bool, "boolean"), (int, "integer"), (float, "number"), (str, "string"))


def generate_schema_from_value(value) -> dict:
    """
    JSON schema with the same shape as ``value``, for Structured Outputs.

    Objects require every key and forbid extras, matching the key check
    ``backend.parse_document`` applies to replies. A list whose items have
    different shapes gets an ``anyOf`` of each distinct item schema.
    """
    if isinstance(value, dict):
        return {
            "type": "object",
            "properties": {key: generate_schema_from_value(item) for key, item in value.items()},
            "required": list(value),
            "additionalProperties": False,
        }

    if isinstance(value, list):
        item_schemas = []
        for item in value:
            schema = generate_schema_from_value(item)
            if schema not in item_schemas:
                item_schemas.append(schema)
        if not item_schemas:
            items = {"type": "string"}
        elif len(item_schemas) == 1:
            items = item_schemas[0]
        else:
            items = {"anyOf": item_schemas}
        return {"type": "array", "items": items}

    if value is None:
        return {"type": ["string", "null"]}

    for python_type, json_type in _SCALAR_TYPES:
        if isinstance(value, python_type):
            return {"type": json_type}
    return {"type": "string"}
