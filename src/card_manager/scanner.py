"""Scan controller: OCR a card image, then extract its fields."""

import logging
import time
from pathlib import Path

from card_manager.extractor.base import Extractor
from card_manager.models.contact import Metadata, ScanResult
from card_manager.ocr.base import OCRBackend

logger = logging.getLogger(__name__)


class CardScanner:
    """Turns business card images into extracted contact fields."""

    def __init__(self, ocr: OCRBackend, extractor: Extractor):
        """
        Initialize the scanner with OCR and extractor backends.

        Args:
            ocr: OCR backend for reading text from images.
            extractor: Language-model extractor for structured fields.
        """
        self._ocr = ocr
        self._extractor = extractor

    def scan(self, image_path: str | Path) -> ScanResult:
        """
        Scan a business card image and extract contact fields.

        Args:
            image_path: Path to the business card image.

        Returns:
            ScanResult with the extracted fields, raw text and timing.

        Raises:
            FileNotFoundError: If the image file does not exist.
            ValueError: If OCR finds no text.
            CardManagerError: If extraction fails.
        """
        start_time = time.perf_counter()

        text = self._ocr.recognize(image_path).text
        if not text.strip():
            raise ValueError("OCR extracted no text from the image")

        fields = self._extractor.extract_fields(text)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info("Scanned %s in %.0fms", image_path, elapsed_ms)
        return ScanResult(
            fields=fields,
            raw_text=text,
            metadata=Metadata(
                ocr_backend=self._ocr.name,
                extractor_backend=self._extractor.name,
                processing_time_ms=round(elapsed_ms, 2),
            ),
        )

    def recognize_only(self, image_path: str | Path) -> str:
        """Run only OCR on the image, without field extraction."""
        return self._ocr.recognize(image_path).text
