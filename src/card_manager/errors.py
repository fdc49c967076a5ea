"""Error types raised by the store, the extraction gateway and the API."""


class CardManagerError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CardManagerError):
    """A required request field is missing or empty."""

    status_code = 400


class NotFoundError(CardManagerError):
    """No contact record exists with the requested id."""

    status_code = 404

    def __init__(self, record_id: int):
        super().__init__("Card not found.")
        self.record_id = record_id


class ConfigurationError(CardManagerError):
    """A required setting (usually the API token) is missing or invalid."""


class GatewayError(CardManagerError):
    """Base class for failures talking to the prediction API."""


class UpstreamSubmissionError(GatewayError):
    """The prediction API did not accept the job."""


class UpstreamPollError(GatewayError):
    """Fetching the job status failed."""


class UpstreamJobFailedError(GatewayError):
    """The job reached the ``failed`` terminal status."""


class UpstreamTimeoutError(GatewayError):
    """The job did not finish within the allowed number of polls."""


class ExtractionParseError(GatewayError):
    """The model output was not a JSON object after cleanup."""
