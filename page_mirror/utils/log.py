"""
Logging utilities for the page mirror.

Provides colorful CLI logging using the rich library.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .errors import MirrorError


# Root logger name; component loggers are its children
ROOT_LOGGER = "page_mirror"

# Global console instance
console = Console()


def setup_logger(
    name: str = ROOT_LOGGER,
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger with rich formatting.
    
    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional file path to write logs
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    
    # Clear existing handlers
    logger.handlers.clear()
    
    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.setLevel(level)
    logger.addHandler(console_handler)
    
    # File handler if specified
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    
    return logger


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """
    Get the logger for a component.
    
    Component loggers propagate to the root logger configured by
    setup_logger, so one call sets the level for the whole package.
    
    Args:
        component: Component name (e.g. 'downloader'), None for the root
        
    Returns:
        Logger instance
    """
    if not component:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")


def report_failure(logger: logging.Logger, error: MirrorError) -> None:
    """
    Log a failure with its kind, target and cause.
    
    Fatal kinds are logged as errors, recoverable ones as warnings.
    
    Args:
        logger: Logger to write to
        error: The failure to report
    """
    level = logging.ERROR if error.kind.fatal else logging.WARNING
    target = error.target if error.target is not None else "-"
    logger.log(level, f"[{error.kind.value}] {target}: {error.cause}")
    if error.hint:
        logger.info(error.hint)


def print_status(message: str, style: str = "bold blue") -> None:
    """
    Print a styled status message.
    
    Args:
        message: Message to print
        style: Rich style string
    """
    console.print(f"[{style}]{escape(message)}[/{style}]", highlight=False)


def print_error(message: str) -> None:
    """Print an error message."""
    print_status(f"❌ {message}", "bold red")


def print_success(message: str) -> None:
    """Print a success message."""
    print_status(f"✅ {message}", "bold green")


def print_warning(message: str) -> None:
    """Print a warning message."""
    print_status(f"⚠️ {message}", "bold yellow")


def print_info(message: str) -> None:
    """Print an info message."""
    print_status(f"ℹ️ {message}", "bold cyan")
