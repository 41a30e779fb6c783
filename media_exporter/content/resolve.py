import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Mapping, Optional, Tuple

from .. import config
from ..models import ContentNode, FocalPoint, FolderItem, GenericFile, ImageFile, MediaItem

NO_FILE_REFERENCE = "Media item has no file source"
UNREADABLE_CROPPER_VALUE = "Image cropper value could not be parsed"


def resolve_media_item(node: ContentNode, media_root: Path) -> MediaItem:
    """
    Classifies a content node and resolves its stored file.

    Never raises: an empty or unparsable file reference is reported on the
    returned item's `problem` field instead.
    """
    if node.content_type == config.FOLDER_TYPE:
        return FolderItem()

    raw = node.properties.get(config.FILE_PROPERTY_ALIAS)
    relative, focal_point, problem = parse_file_reference(raw, node.name)

    source_path = to_source_path(relative, media_root) if relative else None
    if source_path is None and problem is None:
        problem = NO_FILE_REFERENCE

    if node.content_type == config.IMAGE_TYPE:
        return ImageFile(source_path=source_path, focal_point=focal_point, problem=problem)
    return GenericFile(source_path=source_path, problem=problem)


def parse_file_reference(raw: Any, label: str = "") -> Tuple[Optional[str], Optional[FocalPoint], Optional[str]]:
    """
    Reads a file-reference property value.

    Returns:
        (relative_path, focal_point, problem)

    A plain string is a repository-relative path. A string starting with "{"
    (or an already decoded mapping) is an image cropper value carrying
    "src" and "focalPoint". When the cropper value cannot be read, the raw
    string is used as a literal path.
    """
    if raw is None:
        return None, None, None

    if isinstance(raw, Mapping):
        return _from_cropper(raw, json.dumps(raw, default=str), label)

    value = str(raw).strip()
    if not value:
        return None, None, None

    if value.startswith("{"):
        try:
            data = json.loads(value)
        except json.JSONDecodeError as e:
            logging.warning(f"Unreadable cropper value on '{label}': {e}")
            return value, None, UNREADABLE_CROPPER_VALUE
        if not isinstance(data, Mapping):
            logging.warning(f"Cropper value on '{label}' is not an object")
            return value, None, UNREADABLE_CROPPER_VALUE
        return _from_cropper(data, value, label)

    return value, None, None


def _from_cropper(data: Mapping, raw: str, label: str) -> Tuple[Optional[str], Optional[FocalPoint], Optional[str]]:
    src = data.get("src")
    if not src:
        # No src: keep the raw value, same as an unparsed reference
        return raw, None, None

    focal_point = None
    fp = data.get("focalPoint")
    if fp:
        try:
            focal_point = FocalPoint(left=float(fp["left"]), top=float(fp["top"]))
        except (KeyError, TypeError, ValueError) as e:
            logging.warning(f"Ignoring malformed focal point on '{label}': {e}")

    return str(src), focal_point, None


def to_source_path(relative: str, media_root: Path) -> Optional[Path]:
    """
    Joins a repository-relative path (either separator style, leading or
    trailing separators allowed) under the repository's file root.
    Returns None when nothing but separators is left.
    """
    cleaned = relative.strip().strip("/\\").replace("\\", "/")
    parts = [p for p in PurePosixPath(cleaned).parts if p != "."]
    if not parts:
        return None
    return Path(media_root).joinpath(*parts)
