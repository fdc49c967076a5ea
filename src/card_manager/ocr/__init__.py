"""OCR backends for reading text from card images.

Concrete backends are imported from their own modules so that the API
server does not need the OCR libraries installed.
"""

from card_manager.ocr.base import OCRBackend, OCRResult

__all__ = ["OCRBackend", "OCRResult"]
