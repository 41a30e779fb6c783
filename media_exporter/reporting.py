import json
import logging
import traceback
from pathlib import Path
from typing import List, Optional

from . import config
from .exceptions import ExportWriteError
from .models import ExportNode, NameFix

NOT_EXPORTED_HEADER = "Media section not exported!"


class ReportWriter:
    """
    Writes the artifacts of an export run into the export root:
    the manifest, the name-fix sidecar and, on failure, the error file.
    """

    def __init__(self, export_root: Path):
        self.export_root = Path(export_root)

    def write_manifest(self, root: ExportNode) -> Path:
        """Serializes the whole ExportNode tree, children nested."""
        target = self.export_root / config.REPORT_FILENAME
        self._write_json(target, root.to_dict())
        logging.info(f"Manifest written: {target}")
        return target

    def write_name_fixes(self, fixes: List[NameFix]) -> Optional[Path]:
        """
        Writes the sidecar only when there is something to report. A sidecar
        left by an earlier run is removed so it is not read as this run's.
        """
        target = self.export_root / config.FIXED_NAMES_FILENAME
        if not fixes:
            if target.is_file():
                try:
                    target.unlink()
                except OSError as e:
                    raise ExportWriteError(f"Cannot remove stale {target}: {e}") from e
                logging.info(f"Removed name-fix sidecar from an earlier run: {target}")
            return None
        self._write_json(target, [fix.to_dict() for fix in fixes])
        logging.info(f"{len(fixes)} name fixes/errors written: {target}")
        return target

    def write_error(self, error: BaseException) -> Optional[Path]:
        """
        Best effort: a failure here is logged and swallowed, since it
        already happens while handling another failure.
        """
        target = self.export_root / config.ERROR_FILENAME
        try:
            self.export_root.mkdir(parents=True, exist_ok=True)
            target.write_text(format_error(error), encoding="utf-8")
        except OSError as e:
            logging.error(f"Could not write error file {target}: {e}")
            return None
        return target

    def _write_json(self, target: Path, payload) -> None:
        try:
            with target.open("w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise ExportWriteError(f"Cannot write {target}: {e}") from e


def format_error(error: BaseException) -> str:
    """Header, message, source (exception type) and stack trace, one per block."""
    source = f"{type(error).__module__}.{type(error).__qualname__}"
    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return f"{NOT_EXPORTED_HEADER}\n{error}\n{source}\n{trace}"
