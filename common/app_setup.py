"""
Reusable logging and print setup for the nodebind entry points.

Functions:
    setup_logging      - Configure the root logger and return it.
    set_print_logger   - Set the logger used by print_and_log and print_error.
    monkeypatch_print  - Replace built-in print with rich print.
    print_and_log      - Print and log an info message.
    print_error        - Print and log an error message.
"""

import builtins
import logging
import os
import sys
from typing import Optional

from rich import print as rich_print
from rich.logging import RichHandler
from rich.markup import escape

# Module-level variable to hold the logger for print_and_log and print_error
_print_logger: Optional[logging.Logger] = None


def setup_logging(app_name: str = "nodebind", console: bool = False, loglevel: int = logging.INFO, logfile: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for the application.
    - If console=True, logs go to stderr through a RichHandler.
    - Otherwise, logs go to ~/.<app_name>/log.txt or to a custom logfile.
    The configured logger is also registered for print_and_log/print_error.
    """
    logger = logging.getLogger()
    logger.setLevel(loglevel)
    handler: logging.Handler
    if console:
        handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter(f"[{app_name}] %(message)s"))
    else:
        if logfile is None:
            log_dir = os.path.expanduser(f"~/.{app_name}")
            os.makedirs(log_dir, exist_ok=True)
            logfile = os.path.join(log_dir, "log.txt")
        handler = logging.FileHandler(logfile)
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(process)d %(name)s %(message)s'))

    # Remove any existing handlers
    for h in logger.handlers[:]:
        logger.removeHandler(h)

    logger.addHandler(handler)
    set_print_logger(logger)
    logger.debug("Logging initialized for %s", app_name)
    return logger


def set_print_logger(logger: logging.Logger):
    """
    Set the logger to be used by print_and_log and print_error.
    """
    global _print_logger
    _print_logger = logger


def monkeypatch_print():
    """
    Monkeypatch built-in print to use rich.print for all output (no logging).
    """
    def print_to_rich(*args, **kwargs):
        rich_print(*args, **kwargs)
    builtins.print = print_to_rich


def print_and_log(message: str, **kwargs):
    """
    Print to console (via print) and log as info.
    """
    print(message, **kwargs)
    if _print_logger is not None:
        _print_logger.info(message)


def print_error(message: str, **kwargs):
    """
    Print and log an error message (stderr and error level), using the logger set by set_print_logger.
    """
    print(f'[bold red]{escape(message)}[/bold red]', file=sys.stderr, **kwargs)
    if _print_logger is not None:
        _print_logger.error(message)
