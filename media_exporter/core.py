import logging
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from . import config
from .config import ExporterSettings
from .content.provider import ContentProvider
from .export.walker import TreeWalker
from .models import ExportNode, ExportResult, ExportRunState, ExportStatus
from .reporting import ReportWriter, NOT_EXPORTED_HEADER

ROOT_NAME = "Media"


class MediaTreeExporter:
    def __init__(self, provider: ContentProvider, settings: ExporterSettings):
        self.provider = provider
        self.settings = settings
        self.reporter = ReportWriter(settings.export_root)

    def export(self, state: Optional[ExportRunState] = None) -> ExportResult:
        """
        Runs one export of the whole media tree.

        1. Guards (run-once state, non-empty export root, missing root)
        2. Walk & Copy
        3. Write manifest and name-fix sidecar

        Any failure is turned into a NOT_EXPORTED result plus an error file
        in the export root; files copied before the failure stay on disk.
        """
        if state is not None and self.settings.run_once and state.completed:
            logging.debug("Export already ran in this process, skipping.")
            return ExportResult(ExportStatus.SKIPPED, "Media export already ran.")

        export_root = self.settings.export_root
        try:
            export_root.mkdir(parents=True, exist_ok=True)

            if self.settings.empty_folder_only and self._has_files(export_root):
                message = f"Media items already exported. For a new export delete all content of: {export_root}"
                logging.info(message)
                return ExportResult(ExportStatus.ALREADY_EXPORTED, message)

            roots = list(self.provider.get_root_nodes() or [])
            if not roots:
                message = "No media root found."
                logging.info(message)
                return ExportResult(ExportStatus.NO_ROOT, message)

            logging.info(f"Exporting media tree to {export_root} (source files: {self.settings.media_root})")

            with tqdm(desc="Exporting", unit="item", disable=not self.settings.show_progress) as progress:
                walker = TreeWalker(self.provider, self.settings, progress=progress)
                manifest = ExportNode(name=ROOT_NAME, path_segment="")
                manifest.children = walker.walk(roots, export_root)

            self.reporter.write_manifest(manifest)
            self.reporter.write_name_fixes(walker.name_fixes)

        except Exception as e:
            logging.exception("Media export failed.")
            self.reporter.write_error(e)
            return ExportResult(ExportStatus.NOT_EXPORTED, f"{NOT_EXPORTED_HEADER} {e}")

        stats = walker.stats
        message = "Media section exported."
        logging.info(
            f"{message} Folders: {stats.folders}, copied: {stats.files_copied}, "
            f"already present: {stats.files_skipped}, missing: {stats.files_missing}"
        )

        if state is not None:
            state.completed = True

        return ExportResult(
            ExportStatus.EXPORTED,
            message,
            manifest=manifest,
            name_fixes=walker.name_fixes,
            stats=stats,
        )

    def _has_files(self, root: Path) -> bool:
        # Our own log file may already be open in there
        return any(p.is_file() and p.name != config.LOG_FILENAME for p in root.iterdir())


def export_media(provider: ContentProvider,
                 settings: ExporterSettings,
                 state: Optional[ExportRunState] = None) -> ExportResult:
    """
    Single entry point for hosts: call once the content store is ready.
    Pass the same ExportRunState to later calls to honor settings.run_once.
    """
    return MediaTreeExporter(provider, settings).export(state)
