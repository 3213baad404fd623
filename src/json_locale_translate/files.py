"""Reading the source bundle and writing translated bundles to disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import ConfigError, PersistenceError
from .log import get_logger
from .utils import LAYOUT_DIR, LAYOUT_FLAT, LAYOUTS

logger = get_logger(__name__)


def locale_path(locales_dir: Path, locale: str, layout: str = LAYOUT_DIR, name: str = "common") -> Path:
    """Path of the bundle for ``locale``: ``<dir>/<locale>/<name>.json`` or ``<dir>/<locale>.json``."""
    if layout == LAYOUT_DIR:
        return Path(locales_dir) / locale / f"{name}.json"
    if layout == LAYOUT_FLAT:
        return Path(locales_dir) / f"{locale}.json"
    raise ValueError(f"Unknown layout: {layout}")


class JsonSourceLoader:
    """Loads the source document once, before any job is scheduled."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> dict:
        if not self.path.exists():
            raise ConfigError(f"Source file not found: {self.path}")

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"Error parsing JSON in {self.path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Error reading source file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Source file must contain a JSON object: {self.path}")

        logger.info("Loaded %d top-level key(s) from %s", len(data), self.path)
        return data


class JsonOutputWriter:
    """Writes one translated document per language."""

    def __init__(self, locales_dir: Path, layout: str = LAYOUT_DIR, name: str = "common"):
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown layout: {layout}")
        self.locales_dir = Path(locales_dir)
        self.layout = layout
        self.name = name

    def path_for(self, language: str) -> Path:
        return locale_path(self.locales_dir, language, self.layout, self.name)

    def save(self, language: str, content: Any) -> Path:
        output_file = self.path_for(language)

        try:
            serialized = json.dumps(content, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise PersistenceError(
                f"Error serializing JSON for {language}: {e}",
                details={"language": language},
            ) from e

        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            if output_file.exists():
                logger.warning("Overwriting existing file: %s", output_file)
            output_file.write_text(serialized + "\n", encoding="utf-8")
        except OSError as e:
            raise PersistenceError(
                f"Error writing file for {language}: {e}",
                details={"language": language, "path": str(output_file)},
            ) from e

        logger.info("Saved %s translation to %s", language, output_file)
        return output_file
