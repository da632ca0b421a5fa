class DownloaderError(Exception):
    """Base exception for all downloader errors."""


class SourceConnectionError(DownloaderError):
    """Raised when the document source cannot be reached at all."""


class OutputFolderError(DownloaderError):
    """Raised when the output root folder cannot be created."""


class CategoryQueryError(DownloaderError):
    """Raised when a category query cannot be executed or its stream breaks."""
