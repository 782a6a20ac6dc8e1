"""Logging utilities for the scanner."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


class ScannerLogger:
    """Logger wrapper with rich console output."""
    
    def __init__(self, name: str, level: int = logging.INFO) -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self._setup_handlers()
    
    def _setup_handlers(self) -> None:
        """Attach a themed rich handler writing to stderr."""
        console = Console(stderr=True, theme=Theme({
            "info": "cyan",
            "warning": "yellow",
            "error": "red",
            "critical": "red bold",
            "debug": "dim",
        }))
        
        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            markup=False,
        )
        
        formatter = logging.Formatter(
            fmt="%(name)s: %(message)s",
            datefmt="[%X]"
        )
        handler.setFormatter(formatter)
        
        # Loggers are cached by name; avoid stacking handlers on reuse
        self.logger.handlers.clear()
        self.logger.addHandler(handler)
        self.logger.propagate = False
    
    def set_level(self, level: int) -> None:
        """Change the level of the underlying logger."""
        self.logger.setLevel(level)
    
    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(msg, extra=kwargs)
    
    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(msg, extra=kwargs)
    
    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(msg, extra=kwargs)
    
    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(msg, extra=kwargs)
    
    def critical(self, msg: str, **kwargs: Any) -> None:
        """Log critical message."""
        self.logger.critical(msg, extra=kwargs)


_loggers: Dict[str, ScannerLogger] = {}
_level = logging.INFO


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Setup logging configuration for the scanner.
    
    Args:
        level: Logging level
        log_file: Optional log file path
        verbose: Enable verbose logging
    """
    global _level
    if verbose:
        level = logging.DEBUG
    _level = level
    
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            *([logging.FileHandler(log_file)] if log_file else [])
        ]
    )
    
    for scanner_logger in _loggers.values():
        scanner_logger.set_level(level)
    
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> ScannerLogger:
    """Get a scanner logger instance.
    
    Args:
        name: Logger name
        
    Returns:
        Configured logger instance
    """
    if name not in _loggers:
        _loggers[name] = ScannerLogger(name, _level)
    return _loggers[name]
