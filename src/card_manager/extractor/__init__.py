"""LLM extractors for structured data extraction and email drafting."""

from card_manager.extractor.base import Extractor
from card_manager.extractor.replicate import ReplicateExtractor

__all__ = ["Extractor", "ReplicateExtractor"]
