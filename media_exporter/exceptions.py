"""
Custom exception hierarchy for the media exporter.

Per-item problems (missing source files, unreadable cropper values) are not
exceptions; they are recorded on the export output. These types cover the
failures that stop a run or prevent it from starting.
"""


class MediaExporterError(Exception):
    """Base exception for all media exporter errors."""
    pass


class SettingsError(MediaExporterError):
    """Raised when exporter settings are missing or invalid."""
    pass


class ContentProviderError(MediaExporterError):
    """Raised when the media tree cannot be read from its provider."""
    pass


class ExportWriteError(MediaExporterError):
    """Raised when report files cannot be written to the export root."""
    pass
