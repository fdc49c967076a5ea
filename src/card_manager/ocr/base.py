"""OCR collaborator interface used by the card scanner."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass
class OCRResult:
    """Text read from one card image."""

    text: str
    """Recognized lines joined with newlines; empty when nothing was read."""

    confidence: float = 0.0
    """Mean recognition score of the lines (0.0-1.0)."""


class OCRBackend(ABC):
    """Turns a card image into raw text for the extractor."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend label recorded in scan metadata."""
        ...

    @abstractmethod
    def recognize(self, image_path: str | Path) -> OCRResult:
        """
        Read the text printed on a card image.

        Raises:
            FileNotFoundError: If the image file does not exist.
        """
        ...
