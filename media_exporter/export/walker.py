import logging
import shutil
from pathlib import Path
from typing import List, Optional, Sequence, Set

from ..config import ExporterSettings
from ..content.provider import ContentProvider, fetch_children
from ..content.resolve import NO_FILE_REFERENCE, resolve_media_item
from ..models import ContentNode, ExportNode, ExportStats, FolderItem, ImageFile, MediaItem, NameFix
from .naming import sanitize_with_fix

SOURCE_MISSING = "Source file missing"
DUPLICATE_EXPORT_PATH = "Another media item already exported to"
FILE_IN_THE_WAY = "A file already occupies"
FOLDER_IN_THE_WAY = "A folder already occupies"


class TreeWalker:
    """
    Depth-first mirror of a media tree onto the export root.

    Folders become directories, file items are copied next to them unless
    the destination already exists. Name fixes and per-item errors are
    collected on `name_fixes`, in traversal order, at most one per node.
    """

    def __init__(self, provider: ContentProvider, settings: ExporterSettings, progress=None):
        self.provider = provider
        self.settings = settings
        self.progress = progress

        self.name_fixes: List[NameFix] = []
        self.stats = ExportStats()
        # Files claimed during this run, so a sibling with the same sanitized name is flagged
        self._claimed: Set[Path] = set()

    def walk(self, nodes: Sequence[ContentNode], parent_dir: Path) -> List[ExportNode]:
        exported = []
        for node in nodes:
            exported.append(self._export_node(node, parent_dir))
        return exported

    def _export_node(self, node: ContentNode, parent_dir: Path) -> ExportNode:
        segment, fix = sanitize_with_fix(node.name)
        item = resolve_media_item(node, self.settings.media_root)

        extension = self._extension(item)
        path_segment = f"{segment}{extension}" if extension is not None else segment
        export_path = parent_dir / path_segment

        export_node = ExportNode(
            id=node.id,
            name=node.name,
            guid=node.key,
            path_segment=path_segment,
            export_path=export_path,
            source_path=getattr(item, "source_path", None),
            focal_point=item.focal_point if isinstance(item, ImageFile) else None,
        )

        if isinstance(item, FolderItem):
            error = self._materialize_folder(export_path)
        else:
            error = self._materialize_file(item, export_path)
            if error and error.startswith(SOURCE_MISSING):
                export_node.source_path = None

        if error:
            logging.warning(f"'{node.name}' (id {node.id}): {error}")
            if fix is None:
                fix = NameFix(original_name=node.name)
            fix.error_message = error

        if fix is not None:
            self.name_fixes.append(fix)

        if self.progress is not None:
            self.progress.update(1)

        if isinstance(item, FolderItem) and error:
            # Nowhere to put the children
            return export_node

        children = fetch_children(
            self.provider, node,
            page_size=self.settings.page_size,
            max_children=self.settings.max_children,
        )
        if children:
            export_node.children = self.walk(children, export_path)

        return export_node

    def _extension(self, item: MediaItem) -> Optional[str]:
        source = getattr(item, "source_path", None)
        if source is None:
            return None
        return source.suffix

    def _materialize_folder(self, export_path: Path) -> Optional[str]:
        """Creates the folder unless a file sits at its path. Returns an error message or None."""
        if export_path.is_file():
            return f"{FILE_IN_THE_WAY} {export_path}; folder and its contents not exported"
        export_path.mkdir(parents=True, exist_ok=True)
        self.stats.folders += 1
        return None

    def _materialize_file(self, item: MediaItem, export_path: Path) -> Optional[str]:
        """Copies the item's source into place. Returns an error message or None."""
        source = item.source_path
        if source is None:
            self.stats.files_missing += 1
            return item.problem or NO_FILE_REFERENCE

        if not source.is_file():
            self.stats.files_missing += 1
            message = f"{SOURCE_MISSING}: {source}"
            if item.problem:
                message += f" ({item.problem})"
            return message

        if export_path.is_dir():
            self.stats.files_skipped += 1
            return f"{FOLDER_IN_THE_WAY} {export_path}; not copied"

        if export_path in self._claimed:
            self.stats.files_skipped += 1
            return f"{DUPLICATE_EXPORT_PATH} {export_path}; not copied"
        self._claimed.add(export_path)

        if export_path.exists():
            # Never overwrite: earlier runs or manual edits win
            logging.debug(f"Already exported, skipping: {export_path}")
            self.stats.files_skipped += 1
            return None

        shutil.copy2(str(source), str(export_path))
        self.stats.files_copied += 1
        return None
