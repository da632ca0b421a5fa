import logging
import sys

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


class Log:
    """Process-wide logger for the downloader.

    Mirrors the four observer severities: ``success`` sits between INFO and
    WARNING so a level of WARNING hides per-file download lines.
    """

    _logger: logging.Logger = logging.getLogger("document_downloader")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def success(cls, message: str, **kwargs: object) -> None:
        """Log a completed download or a successful setup step."""
        cls._logger.log(SUCCESS, message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)
