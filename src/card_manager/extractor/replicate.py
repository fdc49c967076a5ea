"""Replicate prediction API extractor."""

import logging
import time
from typing import Any, Callable

import httpx

from card_manager.config import DEFAULT_BASE_URL, DEFAULT_MODEL, Settings
from card_manager.errors import (
    ConfigurationError,
    UpstreamJobFailedError,
    UpstreamPollError,
    UpstreamSubmissionError,
    UpstreamTimeoutError,
)
from card_manager.extractor.base import Extractor

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = ("succeeded", "failed")


class ReplicateExtractor(Extractor):
    """Extractor using a hosted model on Replicate's asynchronous prediction API.

    Each call submits a prediction job and then polls its ``urls.get``
    endpoint until the job reaches a terminal status.
    """

    def __init__(
        self,
        api_token: str | None,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        poll_interval: float = 1.0,
        max_poll_attempts: int = 120,
        max_new_tokens: int = 256,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize Replicate extractor.

        Args:
            api_token: Bearer token. Calls fail with ConfigurationError when missing.
            model: Model identifier, e.g. "ibm-granite/granite-3.3-8b-instruct".
            base_url: Prediction API root URL.
            poll_interval: Seconds to wait between status polls.
            max_poll_attempts: Polls allowed per job; 0 disables the limit.
            max_new_tokens: Output length hint passed to the model.
            timeout: Per-request HTTP timeout in seconds.
            transport: Optional httpx transport (used by tests).
            sleep: Function used to wait between polls.
        """
        self._api_token = api_token
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._poll_interval = poll_interval
        self._max_poll_attempts = max_poll_attempts
        self._max_new_tokens = max_new_tokens
        self._timeout = timeout
        self._transport = transport
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ReplicateExtractor":
        """Create an extractor from loaded settings."""
        return cls(
            api_token=settings.api_token,
            model=settings.model,
            base_url=settings.base_url,
            poll_interval=settings.poll_interval,
            max_poll_attempts=settings.max_poll_attempts,
            max_new_tokens=settings.max_new_tokens,
            **kwargs,
        )

    @property
    def name(self) -> str:
        return f"replicate:{self._model}"

    def complete(self, prompt: str) -> str:
        """Submit a prediction and wait for its output."""
        if not self._api_token:
            raise ConfigurationError("Language model API token is not configured on the server.")

        headers = {"Authorization": f"Bearer {self._api_token}"}
        with httpx.Client(
            timeout=self._timeout, headers=headers, transport=self._transport
        ) as client:
            prediction = self._submit(client, prompt)
            prediction = self._wait(client, prediction)

        if prediction.get("status") == "failed":
            raise UpstreamJobFailedError(f"Model prediction failed: {prediction.get('error')}")

        return self._output_text(prediction.get("output"))

    def _submit(self, client: httpx.Client, prompt: str) -> dict[str, Any]:
        """Start a prediction and return the job descriptor."""
        payload = {
            "model": self._model,
            "input": {
                "prompt": prompt,
                "max_new_tokens": self._max_new_tokens,
            },
        }
        try:
            resp = client.post(f"{self._base_url}/predictions", json=payload)
        except httpx.HTTPError as e:
            raise UpstreamSubmissionError(
                f"Cannot reach prediction API at {self._base_url}: {e}"
            ) from e

        data = self._json(resp)
        if resp.status_code != 201:
            raise UpstreamSubmissionError(
                data.get("detail") or "Failed to start prediction."
            )

        logger.debug("Submitted prediction %s (%s)", data.get("id"), data.get("status"))
        return data

    def _wait(self, client: httpx.Client, prediction: dict[str, Any]) -> dict[str, Any]:
        """Poll a job descriptor until its status is terminal."""
        attempts = 0
        while prediction.get("status") not in TERMINAL_STATUSES:
            if self._max_poll_attempts and attempts >= self._max_poll_attempts:
                raise UpstreamTimeoutError(
                    f"Prediction did not finish after {attempts} status checks."
                )
            self._sleep(self._poll_interval)
            attempts += 1

            url = (prediction.get("urls") or {}).get("get")
            if not url:
                raise UpstreamPollError("Prediction response has no status URL.")

            try:
                resp = client.get(url)
            except httpx.HTTPError as e:
                raise UpstreamPollError(f"Cannot fetch prediction status: {e}") from e

            prediction = self._json(resp)
            if resp.status_code != 200:
                raise UpstreamPollError(
                    prediction.get("detail") or "Failed to fetch prediction status."
                )

        logger.info(
            "Prediction %s finished with status %s after %d poll(s)",
            prediction.get("id"),
            prediction.get("status"),
            attempts,
        )
        return prediction

    @staticmethod
    def _json(resp: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body, tolerating non-JSON error pages."""
        try:
            data = resp.json()
        except ValueError:
            return {"detail": resp.text.strip() or None}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _output_text(output: Any) -> str:
        """Join streamed output fragments into a single string."""
        if output is None:
            return ""
        if isinstance(output, list):
            return "".join(str(part) for part in output)
        return str(output)
