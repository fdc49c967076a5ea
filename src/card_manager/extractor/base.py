"""Base class for language-model extractors."""

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

from card_manager.errors import ExtractionParseError, ValidationError
from card_manager.models.contact import ContactFields, ExtractedFields

logger = logging.getLogger(__name__)

FIELD_KEYS = ("name", "title", "company", "phone", "email")

EXTRACTION_PROMPT_TEMPLATE = """You are an expert at reading business cards.
Extract the person's name, job title, company, phone number and email address from the text below.
Reply ONLY with a valid JSON object using exactly these keys: "name", "title", "company", "phone", "email".
If a field cannot be found, use an empty string.
Text:

{text}"""

EMAIL_PROMPT_TEMPLATE = """You are a professional communication assistant.
Write a short, professional follow-up email to {name}, a {title} at {company}.
Mention that it was a pleasure to meet them and that you would like to stay in touch about future opportunities.
Keep the email under 100 words. Sign it with '{signature}'."""

EMAIL_SIGNATURE = "Best regards,"

_CODE_FENCE = re.compile(r"```(?:json)?\n?|\n?```", re.IGNORECASE)


class Extractor(ABC):
    """Abstract base class for language-model extractors.

    Subclasses implement :meth:`complete`; field extraction and email
    drafting are built on top of it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this extractor."""
        ...

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Run a prompt through the model and return the generated text.

        Raises:
            ConfigurationError: If the extractor is missing credentials.
            GatewayError: If the model provider rejects or fails the job.
        """
        ...

    def extract_fields(self, text: str) -> ExtractedFields:
        """
        Extract contact fields from raw OCR text.

        Args:
            text: Raw text read from a business card.

        Returns:
            ExtractedFields with every key present (empty when unknown).

        Raises:
            ValidationError: If the text is empty.
            ExtractionParseError: If the model output is not a JSON object.
        """
        if not text or not text.strip():
            raise ValidationError("Text must not be empty.")

        output = self.complete(EXTRACTION_PROMPT_TEMPLATE.format(text=text))
        return self._parse_fields(output)

    def draft_email(self, card: ContactFields) -> str:
        """Write a short follow-up email for a contact."""
        prompt = EMAIL_PROMPT_TEMPLATE.format(
            name=card.name,
            title=card.title or "professional",
            company=card.company,
            signature=EMAIL_SIGNATURE,
        )
        return self.complete(prompt)

    def _parse_fields(self, output: str) -> ExtractedFields:
        """Parse model output into ExtractedFields."""
        cleaned = self._strip_code_fence(output)

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.warning("Model returned invalid JSON: %r", output[:200])
            raise ExtractionParseError(f"Invalid JSON response from model: {e}") from e

        if not isinstance(data, dict):
            raise ExtractionParseError(
                f"Expected a JSON object from model, got {type(data).__name__}"
            )

        return ExtractedFields(**{key: self._to_str(data.get(key)) for key in FIELD_KEYS})

    @staticmethod
    def _strip_code_fence(text: str) -> str:
        """Remove markdown code-fence markup around the model output."""
        return _CODE_FENCE.sub("", text).strip()

    @staticmethod
    def _to_str(value: Any) -> str:
        """Convert value to string, handling lists by taking first element."""
        if value is None:
            return ""
        if isinstance(value, list):
            return str(value[0]) if value else ""
        return str(value)
