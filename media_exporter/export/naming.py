from typing import Optional, Tuple

from .. import config
from ..models import NameFix

# Segments the filesystem reads as "this folder" / "parent folder"
RELATIVE_SEGMENTS = (".", "..")


def sanitize_name(name: str) -> str:
    """Replaces every reserved filename character with the replacement char."""
    fixed = "".join(
        config.REPLACEMENT_CHAR if c in config.INVALID_FILENAME_CHARS else c
        for c in name
    )
    if fixed in RELATIVE_SEGMENTS:
        fixed = config.REPLACEMENT_CHAR * len(fixed)
    return fixed


def sanitize_with_fix(name: str) -> Tuple[str, Optional[NameFix]]:
    """
    Returns the sanitized path segment, plus a NameFix when it differs from
    the display name.
    """
    fixed = sanitize_name(name)
    if fixed == name:
        return fixed, None
    return fixed, NameFix(original_name=name, fixed_name=fixed)
