"""PaddleOCR backend implementation.

Requires the ``ocr`` extra (``pip install card-manager[ocr]``).
"""

import logging
import os
from pathlib import Path

from paddleocr import PaddleOCR

from card_manager.ocr.base import OCRBackend, OCRResult

logger = logging.getLogger(__name__)


# Disable OneDNN/MKLDNN to avoid PIR compatibility issues with PaddlePaddle 3.x
os.environ.setdefault("FLAGS_use_mkldnn", "0")


class PaddleOCRBackend(OCRBackend):
    """OCR backend using PaddleOCR."""

    def __init__(self, lang: str = "en"):
        self._lang = lang
        self._ocr = PaddleOCR(lang=lang, enable_mkldnn=False)

    @property
    def name(self) -> str:
        return f"paddleocr:{self._lang}"

    def recognize(self, image_path: str | Path) -> OCRResult:
        path = Path(image_path)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {path}")

        result = self._ocr.predict(str(path))
        if not result or not result[0]:
            logger.debug("No text detected in %s", path)
            return OCRResult(text="", confidence=0.0)

        # PaddleOCR 3.x result pages expose rec_texts and rec_scores
        page = result[0]
        texts = [str(t) for t in page.get("rec_texts", [])]
        scores = [float(s) for s in page.get("rec_scores", [])]
        logger.debug("Read %d line(s) from %s", len(texts), path)

        return OCRResult(
            text="\n".join(texts),
            confidence=sum(scores) / len(scores) if scores else 0.0,
        )
