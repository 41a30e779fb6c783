"""
Configuration constants and settings for the media exporter.
"""
import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

from .exceptions import SettingsError

# --- Export Destination ---
DEFAULT_EXPORT_ROOT = Path("MediaExport")

REPORT_FILENAME = "export-report.json"
FIXED_NAMES_FILENAME = "export-fixednames.json"
ERROR_FILENAME = "export-error.json"
LOG_FILENAME = "exporter.log"

# --- Content Repository Conventions ---
FOLDER_TYPE = "Folder"
IMAGE_TYPE = "Image"
FILE_PROPERTY_ALIAS = "umbracoFile"

# --- Name Sanitization ---
# Union of reserved characters across platforms so exported trees stay portable
INVALID_FILENAME_CHARS = frozenset('<>:"/\\|?*') | frozenset(chr(i) for i in range(32))
REPLACEMENT_CHAR = "_"

# --- Child Fetching ---
DEFAULT_PAGE_SIZE = 100

# Settings file section and key names
SETTINGS_SECTION = "MediaExporter"
SETTINGS_KEYS = {
    "ExportRootPath": "export_root",
    "MediaRootPath": "media_root",
    "ExportToEmptyFolderOnly": "empty_folder_only",
    "ExportRunOnce": "run_once",
    "MaxChildren": "max_children",
    "PageSize": "page_size",
}


@dataclass(frozen=True)
class ExporterSettings:
    """
    Everything one export run needs to know about its surroundings.
    """
    export_root: Path = DEFAULT_EXPORT_ROOT
    media_root: Path = Path(".")
    empty_folder_only: bool = False
    run_once: bool = False

    # None means every child is exported
    max_children: Optional[int] = None
    page_size: int = DEFAULT_PAGE_SIZE

    show_progress: bool = False

    def __post_init__(self):
        object.__setattr__(self, "export_root", Path(self.export_root))
        object.__setattr__(self, "media_root", Path(self.media_root))
        if self.max_children is not None and self.max_children < 0:
            raise SettingsError(f"max_children must be >= 0, got {self.max_children}")
        if self.page_size < 1:
            raise SettingsError(f"page_size must be >= 1, got {self.page_size}")
        for name in ("empty_folder_only", "run_once", "show_progress"):
            if not isinstance(getattr(self, name), bool):
                raise SettingsError(f"{name} must be true or false, got {getattr(self, name)!r}")


def load_settings(path: Optional[Path] = None, **overrides) -> ExporterSettings:
    """
    Builds ExporterSettings from an optional JSON settings file.

    The file carries a "MediaExporter" section, e.g.
        {"MediaExporter": {"ExportRootPath": "/srv/media-export"}}
    Keys that are missing or empty keep their defaults. Keyword overrides
    (None values are ignored) win over the file.
    """
    values = {}
    if path is not None:
        values.update(_read_settings_file(Path(path)))

    known = {f.name for f in fields(ExporterSettings)}
    for name, value in overrides.items():
        if name not in known:
            raise SettingsError(f"Unknown setting: {name}")
        if value is not None:
            values[name] = value

    try:
        return replace(ExporterSettings(), **values)
    except (TypeError, ValueError) as e:
        raise SettingsError(f"Invalid settings: {e}") from e


def _read_settings_file(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SettingsError(f"Cannot read settings file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SettingsError(f"Settings file {path} is not valid JSON: {e}") from e

    section = data.get(SETTINGS_SECTION) if isinstance(data, dict) else None
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise SettingsError(f"'{SETTINGS_SECTION}' in {path} must be an object")

    values = {}
    for key, attr in SETTINGS_KEYS.items():
        value = section.get(key)
        # Empty strings behave like an unset key (literal default stays)
        if value is None or value == "":
            continue
        values[attr] = value
    return values
