"""Batch scanning of many business card images."""

import csv
import io
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from card_manager.extractor.base import FIELD_KEYS
from card_manager.scanner import CardScanner

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Result of scanning multiple images."""

    results: list[dict] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)
    total_time_ms: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results) + len(self.errors)

    @property
    def succeeded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.errors)


class BatchProcessor:
    """Scan multiple card images, isolating failures per image."""

    IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".webp"}

    def __init__(self, scanner: CardScanner):
        self._scanner = scanner

    def process(self, image_paths: list[Path]) -> BatchResult:
        """
        Scan every image and collect fields or errors.

        A failing image is recorded in ``errors`` and does not stop the batch.
        """
        start_time = time.perf_counter()
        result = BatchResult()

        for path in image_paths:
            try:
                scan = self._scanner.scan(path)
            except Exception as e:
                logger.warning("Failed to scan %s: %s", path, e)
                result.errors.append({"image_path": str(path), "error": str(e)})
                continue

            row = scan.fields.model_dump()
            row["image_path"] = str(path)
            result.results.append(row)

        result.total_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
        return result

    def collect_images(self, inputs: list[Path]) -> list[Path]:
        """
        Collect image paths from files and directories.

        Directories are scanned non-recursively. The returned list is sorted
        and free of duplicates.
        """
        images: set[Path] = set()

        for path in inputs:
            if path.is_dir():
                images.update(
                    p for p in path.iterdir()
                    if p.is_file() and p.suffix.lower() in self.IMAGE_EXTENSIONS
                )
            elif path.is_file() and path.suffix.lower() in self.IMAGE_EXTENSIONS:
                images.add(path)

        return sorted(images)

    def to_json(self, result: BatchResult) -> str:
        output = {
            "metadata": {
                "total": result.total,
                "succeeded": result.succeeded,
                "failed": result.failed,
                "total_time_ms": result.total_time_ms,
            },
            "results": result.results,
            "errors": result.errors,
        }
        return json.dumps(output, indent=2, ensure_ascii=False)

    def to_csv(self, result: BatchResult) -> str:
        """Format a batch result as CSV, one row per image."""
        output = io.StringIO()
        fieldnames = ["image_path", *FIELD_KEYS, "error"]
        writer = csv.DictWriter(output, fieldnames=fieldnames)
        writer.writeheader()

        for item in result.results:
            row = {k: item.get(k, "") for k in fieldnames}
            row["error"] = ""
            writer.writerow(row)

        for item in result.errors:
            row = {k: "" for k in fieldnames}
            row["image_path"] = item["image_path"]
            row["error"] = item["error"]
            writer.writerow(row)

        return output.getvalue()
