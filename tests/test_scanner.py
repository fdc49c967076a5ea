"""Tests for the card scanner controller and OCR data types."""

from unittest.mock import Mock

import pytest

from card_manager.errors import ExtractionParseError
from card_manager.models.contact import ExtractedFields, ScanResult
from card_manager.ocr.base import OCRResult
from card_manager.scanner import CardScanner


def _mock_ocr(text: str) -> Mock:
    ocr = Mock()
    ocr.name = "mock-ocr"
    ocr.recognize.return_value = OCRResult(text=text, confidence=0.9)
    return ocr


class TestCardScanner:
    """Test CardScanner with mocked backends."""

    def test_scan_success(self):
        """Test successful scan fills fields, raw text and metadata."""
        ocr = _mock_ocr("Jane Doe\nCTO\njane@acme.com")
        extractor = Mock()
        extractor.name = "mock-extractor"
        extractor.extract_fields.return_value = ExtractedFields(
            name="Jane Doe", title="CTO", email="jane@acme.com"
        )

        result = CardScanner(ocr=ocr, extractor=extractor).scan("card.jpg")

        assert result.fields.name == "Jane Doe"
        assert result.fields.title == "CTO"
        assert result.raw_text == "Jane Doe\nCTO\njane@acme.com"
        assert result.metadata is not None
        assert result.metadata.ocr_backend == "mock-ocr"
        assert result.metadata.extractor_backend == "mock-extractor"
        assert result.metadata.processing_time_ms >= 0
        extractor.extract_fields.assert_called_once_with("Jane Doe\nCTO\njane@acme.com")

    def test_scan_empty_ocr_raises(self):
        """Test that empty OCR text raises ValueError without calling the model."""
        extractor = Mock()
        scanner = CardScanner(ocr=_mock_ocr("  \n"), extractor=extractor)

        with pytest.raises(ValueError, match="OCR extracted no text"):
            scanner.scan("card.jpg")
        extractor.extract_fields.assert_not_called()

    def test_scan_propagates_extraction_errors(self):
        extractor = Mock()
        extractor.extract_fields.side_effect = ExtractionParseError("bad output")
        scanner = CardScanner(ocr=_mock_ocr("Jane"), extractor=extractor)

        with pytest.raises(ExtractionParseError):
            scanner.scan("card.jpg")

    def test_recognize_only(self):
        """Test OCR-only mode skips extraction."""
        extractor = Mock()
        scanner = CardScanner(ocr=_mock_ocr("Test OCR output"), extractor=extractor)

        assert scanner.recognize_only("card.jpg") == "Test OCR output"
        extractor.extract_fields.assert_not_called()


class TestModels:
    """Test OCR and scan result types."""

    def test_ocr_result_defaults(self):
        assert OCRResult(text="Hello", confidence=0.95).confidence == 0.95
        assert OCRResult(text="").confidence == 0.0

    def test_scan_result_json(self):
        """Test ScanResult serializes with nested fields."""
        result = ScanResult(fields=ExtractedFields(name="Jane"), raw_text="Jane")
        data = result.model_dump()

        assert data["fields"]["name"] == "Jane"
        assert data["metadata"] is None
