"""Imagen REST Client"""

import httpx
import pybreaker

from core import get_logger

logger = get_logger(__name__)


class ImagenError(Exception):
    """Image generation request failed."""


class ImagenClient:
    """
    Client for the Imagen ``:predict`` endpoint with circuit breaker protection.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "imagen-4.0-generate-001",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
    ) -> None:
        """
        Initialize Imagen client with circuit breaker.

        Args:
            api_key: Gemini API key
            model: Imagen model name
            base_url: API base URL
            timeout: Request timeout in seconds
        """
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout, headers={"x-goog-api-key": api_key})

        class BreakerListener(pybreaker.CircuitBreakerListener):
            """Listener for circuit breaker state changes."""

            def state_change(self, cb, old_state, new_state):
                logger.warning(
                    "breaker_state_change",
                    breaker=cb.name,
                    from_state=str(old_state),
                    to_state=str(new_state),
                )

        self._breaker = pybreaker.CircuitBreaker(
            fail_max=5,
            reset_timeout=30,
            name="imagen-http",
            listeners=[BreakerListener()],
        )

        logger.info("client_init", model=self.model)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:predict"

    def generate(self, prompt: str, aspect_ratio: str = "1:1", mime_type: str = "image/jpeg") -> str | None:
        """
        Generate one image.

        Args:
            prompt: Image prompt
            aspect_ratio: Output aspect ratio
            mime_type: Output encoding

        Returns:
            Base64-encoded image bytes, or None when the model produced no image

        Raises:
            ImagenError: On HTTP failure or open circuit
        """
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": aspect_ratio,
                "outputOptions": {"mimeType": mime_type},
            },
        }

        def _make_request() -> httpx.Response:
            response = self._client.post(self.endpoint, json=payload)
            response.raise_for_status()
            return response

        try:
            response = self._breaker.call(_make_request)
        except pybreaker.CircuitBreakerError as e:
            logger.error("generate_failed", error="Circuit breaker open")
            raise ImagenError("Image service temporarily unavailable.") from e
        except httpx.HTTPStatusError as e:
            logger.warning("http_error", status=e.response.status_code)
            raise ImagenError(f"Image generation request failed ({e.response.status_code}).") from e
        except httpx.HTTPError as e:
            logger.warning("http_error", error=str(e))
            raise ImagenError(f"Image generation request failed: {e}") from e

        data = response.json()
        if not isinstance(data, dict):
            logger.error("invalid_response", type=type(data).__name__)
            return None

        for prediction in data.get("predictions") or []:
            encoded = prediction.get("bytesBase64Encoded") if isinstance(prediction, dict) else None
            if encoded:
                logger.info("image_generated", size=len(encoded))
                return encoded

        logger.warning("no_image", filtered=data.get("raiFilteredReason"))
        return None

    def close(self) -> None:
        """Close HTTP client"""
        self._client.close()

    def __enter__(self) -> "ImagenClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
