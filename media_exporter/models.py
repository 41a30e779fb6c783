from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

@dataclass(frozen=True)
class FocalPoint:
    """
    Normalized (left, top) coordinate of the important region of an image.
    """
    left: float
    top: float

    def to_dict(self) -> Dict[str, float]:
        return {"Left": self.left, "Top": self.top}


@dataclass
class ContentNode:
    """
    A media item as handed over by the content repository.
    """
    id: int
    name: str
    key: str
    content_type: str               # Folder/Image/File/...
    children: List["ContentNode"] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)


# --- Resolved media items (one variant per node) ---

@dataclass(frozen=True)
class FolderItem:
    pass


@dataclass(frozen=True)
class ImageFile:
    source_path: Optional[Path]
    focal_point: Optional[FocalPoint] = None
    problem: Optional[str] = None


@dataclass(frozen=True)
class GenericFile:
    source_path: Optional[Path]
    problem: Optional[str] = None


MediaItem = Union[FolderItem, ImageFile, GenericFile]


@dataclass
class ExportNode:
    """
    One entry of the export manifest. Directories have no source_path;
    files whose source could not be found keep source_path as None too.
    """
    name: str
    path_segment: str
    id: Optional[int] = None
    guid: Optional[str] = None
    export_path: Optional[Path] = None
    source_path: Optional[Path] = None
    focal_point: Optional[FocalPoint] = None
    children: List["ExportNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Id": self.id,
            "Name": self.name,
            "PathSegment": self.path_segment,
            "Guid": self.guid,
            "ExportPath": str(self.export_path) if self.export_path else None,
            "UmbracoFilePath": str(self.source_path) if self.source_path else None,
            "FocalPoint": self.focal_point.to_dict() if self.focal_point else None,
            "Children": [child.to_dict() for child in self.children],
        }


@dataclass
class NameFix:
    """
    Audit entry for a node whose name had to be sanitized or whose source
    file could not be located.
    """
    original_name: str
    fixed_name: Optional[str] = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "UmbracoName": self.original_name,
            "FixedName": self.fixed_name,
            "ErrorMessage": self.error_message,
        }


class ExportStatus(Enum):
    EXPORTED = "exported"
    ALREADY_EXPORTED = "already exported"
    NO_ROOT = "no root found"
    NOT_EXPORTED = "not exported"
    SKIPPED = "skipped"


@dataclass
class ExportStats:
    folders: int = 0
    files_copied: int = 0
    files_skipped: int = 0          # destination already existed
    files_missing: int = 0


@dataclass
class ExportResult:
    status: ExportStatus
    message: str
    manifest: Optional[ExportNode] = None
    name_fixes: List[NameFix] = field(default_factory=list)
    stats: ExportStats = field(default_factory=ExportStats)

    @property
    def ok(self) -> bool:
        return self.status not in (ExportStatus.NOT_EXPORTED, ExportStatus.NO_ROOT)


@dataclass
class ExportRunState:
    """
    Caller-owned record of whether an export already completed in this
    process. Pass the same instance to repeated calls to make them no-ops
    when run_once is configured.
    """
    completed: bool = False
