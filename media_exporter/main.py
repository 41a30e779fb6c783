import argparse
import logging
import sys
from pathlib import Path

from . import config
from .config import load_settings
from .content.provider import JsonContentProvider
from .core import export_media
from .exceptions import MediaExporterError

def setup_logging(export_root: Path, verbose: bool):
    """Sets up logging to both console and a file in the export root."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Create export root if it doesn't exist so we can log there
    export_root.mkdir(parents=True, exist_ok=True)
    log_file = export_root / config.LOG_FILENAME

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Media Exporter: mirror a CMS media tree onto the filesystem")

    p.add_argument("tree", type=Path, help="JSON dump of the media tree")
    p.add_argument("media_root", type=Path, help="Folder the CMS stores media files in (e.g. the web root)")

    p.add_argument("--dest", type=Path, default=None, help="Export root (default: from --config, else ./MediaExport)")
    p.add_argument("--config", type=Path, default=None, help="JSON settings file with a 'MediaExporter' section")
    p.add_argument("--empty-only", action="store_true", default=None, help="Abort if the export root already contains files")
    p.add_argument("--max-children", type=int, default=None, help="Export at most N children per item (default: all)")
    p.add_argument("--progress", action="store_true", help="Show a progress bar")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)

    try:
        settings = load_settings(
            args.config,
            export_root=args.dest,
            media_root=args.media_root.resolve(),
            empty_folder_only=args.empty_only,
            max_children=args.max_children,
            show_progress=args.progress,
        )
    except MediaExporterError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    export_root = settings.export_root.resolve()
    setup_logging(export_root, args.verbose)

    logging.info("=== Media Exporter Started ===")
    logging.info(f"Tree:   {args.tree}")
    logging.info(f"Media:  {settings.media_root}")
    logging.info(f"Export: {export_root}")

    try:
        provider = JsonContentProvider(args.tree)
        result = export_media(provider, settings)
    except MediaExporterError as e:
        logging.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)

    print(result.message)
    if not result.ok:
        sys.exit(1)

if __name__ == "__main__":
    main()
