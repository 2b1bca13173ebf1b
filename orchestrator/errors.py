"""Exceptions raised by the module loader."""

import logging

logger = logging.getLogger(__name__)


class BindingError(Exception):
    """Base error for the module loader, optionally logged on creation."""
    def __init__(self, message="A binding error occurred", log=False):
        self.message = message
        super().__init__(self.message)
        if log:
            logger.error(message)


class ArgumentError(BindingError):
    """A required argument was missing or unusable."""


class ParseError(BindingError):
    """A binding declaration could not be parsed."""
