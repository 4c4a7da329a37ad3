"""
Configuration management for the healthcare translation service.
"""

import os
import logging
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

ASYNC_MODES = ['eventlet', 'threading', 'gevent']
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class Config:
    """
    Configuration for the translation service.

    Reads everything from the environment (a local .env file is honoured)
    and validates it once at construction.
    """

    def __init__(self):
        """Initialize configuration with environment variables."""
        self.openai_api_key: Optional[str] = os.getenv('OPENAI_API_KEY')
        self.openai_model: str = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
        self.translation_temperature: float = float(os.getenv('TRANSLATION_TEMPERATURE', '0.3'))
        self.report_temperature: float = float(os.getenv('REPORT_TEMPERATURE', '0.7'))
        self.report_max_tokens: int = int(os.getenv('REPORT_MAX_TOKENS', '4096'))
        self.debounce_ms: int = int(os.getenv('DEBOUNCE_MS', '500'))
        self.circuit_failure_threshold: int = int(os.getenv('CIRCUIT_FAILURE_THRESHOLD', '5'))
        self.circuit_reset_timeout: float = float(os.getenv('CIRCUIT_RESET_TIMEOUT', '60'))
        self.max_upload_mb: int = int(os.getenv('MAX_UPLOAD_MB', '10'))
        self.socketio_async_mode: str = os.getenv('SOCKETIO_ASYNC_MODE', 'eventlet')
        self.cors_origins: str = os.getenv('CORS_ORIGINS', '*')
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.host: str = os.getenv('HOST', '0.0.0.0')
        self.port: int = int(os.getenv('PORT', '5000'))

        self._validate_config()

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def _validate_config(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: If configuration values are invalid.
        """
        if self.socketio_async_mode not in ASYNC_MODES:
            raise ValueError(
                f"Invalid SocketIO async mode: {self.socketio_async_mode}. "
                f"Must be one of: {ASYNC_MODES}"
            )

        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level}. Must be one of: {LOG_LEVELS}"
            )

        if self.debounce_ms < 0:
            raise ValueError(f"Debounce interval must be >= 0 ms, got: {self.debounce_ms}")

        if self.circuit_failure_threshold < 1:
            raise ValueError(
                f"Circuit failure threshold must be >= 1, got: {self.circuit_failure_threshold}"
            )

        if not 0.0 <= self.translation_temperature <= 2.0:
            raise ValueError(
                f"Translation temperature must be between 0-2, got: {self.translation_temperature}"
            )

        if not 0.0 <= self.report_temperature <= 2.0:
            raise ValueError(
                f"Report temperature must be between 0-2, got: {self.report_temperature}"
            )

        if self.max_upload_mb < 1:
            raise ValueError(f"Max upload size must be >= 1 MB, got: {self.max_upload_mb}")

        if not self.openai_api_key:
            logger.warning("OPENAI_API_KEY is not set; provider calls will fail")


def configure_logging(level: str = 'INFO') -> None:
    """Configure root logging once for the whole service."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )


# Global configuration instance
config = Config()
