import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

# Template context attached to records through ``extra=``
LOG_CONTEXT_FIELDS = ("template_name", "set_name", "root")
OWNED_HANDLER_ATTR = "_template_pipeline_handler"


class LogConfig:
    """Logging configuration manager."""

    def __init__(
        self,
        log_level: str = 'INFO',
        log_file: Optional[Union[str, Path]] = None,
        log_format: Optional[str] = None,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        json_logging: bool = False
    ):
        """
        Initialize the logging configuration.

        Args:
            log_level: Logging level
            log_file: Optional log file path
            log_format: Optional log format string
            max_bytes: Maximum size of log file before rotation
            backup_count: Number of backup files to keep
            json_logging: Whether to use JSON logging format
        """
        self.log_level = getattr(logging, log_level.upper())
        self.log_file = log_file
        self.log_format = log_format or (
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.json_logging = json_logging

    @classmethod
    def from_configuration(cls, config) -> 'LogConfig':
        """Build a LogConfig from a RendererConfiguration."""
        return cls(
            log_level=config.log_level,
            log_file=config.log_file,
            json_logging=config.json_logging
        )

    def _formatter(self) -> logging.Formatter:
        if self.json_logging:
            return JsonFormatter()
        return logging.Formatter(self.log_format)

    def _handlers(self) -> List[logging.Handler]:
        handlers: List[logging.Handler] = [logging.StreamHandler()]
        if self.log_file:
            Path(self.log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.handlers.RotatingFileHandler(
                self.log_file,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count,
                encoding="utf-8"
            ))
        formatter = self._formatter()
        for handler in handlers:
            handler.setFormatter(formatter)
            handler.setLevel(self.log_level)
            setattr(handler, OWNED_HANDLER_ATTR, True)
        return handlers

    def configure(self) -> None:
        """
        Install console and optional rotating file handlers on the root logger.

        Handlers installed by an earlier ``configure`` call are closed and
        replaced; handlers added by anything else are left in place.
        """
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)

        for handler in root_logger.handlers[:]:
            if getattr(handler, OWNED_HANDLER_ATTR, False):
                root_logger.removeHandler(handler)
                handler.close()

        for handler in self._handlers():
            root_logger.addHandler(handler)


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string
        """
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key in LOG_CONTEXT_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data)
