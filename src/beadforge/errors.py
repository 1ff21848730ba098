"""BeadForge error hierarchy.

All custom exceptions inherit from BeadForgeError, enabling callers
to catch the base class for blanket error handling or specific
subclasses for targeted recovery (e.g. disabling an undo button when
``NoHistoryError`` would be raised).
"""

from __future__ import annotations


class BeadForgeError(Exception):
    """Base exception for all BeadForge errors."""


class ConfigError(BeadForgeError):
    """Raised when configuration loading or validation fails."""


class PaletteError(BeadForgeError):
    """Raised when palette construction or lookup fails."""


class EmptyPaletteError(PaletteError):
    """Raised when a palette (or matcher palette) would contain zero colors."""


class UnknownPaletteError(PaletteError):
    """Raised when a preset palette identifier is not recognized."""


class InvalidImageError(BeadForgeError):
    """Raised for empty or malformed pixel buffers and non-positive dimensions."""


class ConversionError(BeadForgeError):
    """Raised when a conversion stage fails.

    Attributes:
        stage: Name of the stage that failed (e.g. ``"decode"``, ``"match"``).
    """

    def __init__(self, message: str, stage: str = "") -> None:
        super().__init__(message)
        self.stage = stage


class EditorError(BeadForgeError):
    """Base class for grid editing failures."""


class NoActiveResultError(EditorError):
    """Raised when editing is attempted before a conversion result is loaded."""


class NoHistoryError(EditorError):
    """Raised on undo/redo when the respective stack is empty."""


class BatchError(EditorError):
    """Base class for batch transaction misuse."""


class BatchAlreadyActiveError(BatchError):
    """Raised when a batch is started while another is active."""


class NoActiveBatchError(BatchError):
    """Raised when committing or cancelling without an active batch."""
