"""
YouTube Thumbnail Studio - Utilities
====================================
Common utilities, logging, and helper functions.
"""

import sys
import asyncio
import logging
from pathlib import Path
from datetime import datetime
from typing import Awaitable, Optional, TypeVar

from errors import ThumbnailError, TransportError

T = TypeVar("T")

# Configure stdout encoding for Windows
if sys.platform == 'win32':
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace')


# =============================================================================
# COLORED LOGGER
# =============================================================================

class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for terminal output"""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[34m',      # Blue
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'SUCCESS': '\033[32m',   # Green
        'RESET': '\033[0m',
        'BOLD': '\033[1m',
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')

        formatted = f"[{timestamp}] [{color}{record.levelname:^8}{reset}] {record.getMessage()}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def setup_logger(name: str, log_file: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Setup a colored logger with optional file output"""
    from config import LOG_LEVEL

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO))

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColoredFormatter())
    logger.addHandler(console_handler)

    # File handler (plain text)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


# Add SUCCESS level
logging.SUCCESS = 25
logging.addLevelName(logging.SUCCESS, 'SUCCESS')

def success(self, message, *args, **kwargs):
    if self.isEnabledFor(logging.SUCCESS):
        self._log(logging.SUCCESS, message, args, **kwargs)

logging.Logger.success = success


# =============================================================================
# TEXT HELPERS
# =============================================================================

def truncate(text: Optional[str], limit: int = 200) -> str:
    """Shorten text for log lines and error messages"""
    if not text:
        return ""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings"""
    return value is None or not value.strip()


# =============================================================================
# REMOTE CALLS
# =============================================================================

async def call_with_timeout(call: Awaitable[T], timeout: Optional[float], description: str) -> T:
    """
    Await a single remote call, converting timeouts and transport failures
    into TransportError. Cancellation propagates unchanged.
    """
    try:
        if timeout:
            return await asyncio.wait_for(call, timeout=timeout)
        return await call
    except asyncio.TimeoutError as e:
        suffix = f" after {timeout:g}s" if timeout else ""
        raise TransportError(f"{description} timed out{suffix}") from e
    except ThumbnailError:
        raise
    except Exception as e:
        raise TransportError(f"{description} failed: {e}") from e
