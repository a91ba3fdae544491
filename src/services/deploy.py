"""
Deployment Service
Mock deployment producing a shareable URL and QR code.
"""

import asyncio
import random
import string
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from core import get_logger
from core.id import new_deployment_id
from monitoring import metrics_collector


logger = get_logger(__name__)

TRANSIENT_FAILURE_MESSAGE = "Mock deployment failed due to a transient error. Please try again."
QR_CODE_ENDPOINT = "https://api.qrserver.com/v1/create-qr-code/"
_BASE36 = string.digits + string.ascii_lowercase


class DeploymentError(Exception):
    """Deployment failed."""


class DeploymentResult(BaseModel):
    """Where the app is reachable."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=new_deployment_id)
    url: str
    qr_code: str = Field(alias="qrCode")


def qr_code_url(url: str, size: int = 160) -> str:
    return f"{QR_CODE_ENDPOINT}?size={size}x{size}&data={quote(url, safe='')}"


class DeploymentService:
    """
    Simulated deployment.

    Waits ``delay`` seconds, then fails with probability ``failure_rate``
    or returns a fresh ``https://a0-xxxxxxxx.dev-app.io`` address.
    """

    def __init__(
        self,
        delay: float = 2.5,
        failure_rate: float = 0.05,
        rng: random.Random | None = None,
    ) -> None:
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        self.delay = delay
        self.failure_rate = failure_rate
        self.rng = rng or random.Random()

    def _app_url(self) -> str:
        slug = "".join(self.rng.choice(_BASE36) for _ in range(8))
        return f"https://a0-{slug}.dev-app.io"

    async def deploy(self, source_code: str) -> DeploymentResult:
        """
        Deploy source code.

        Raises:
            DeploymentError: Nothing to deploy, or a simulated transient failure
        """
        if not source_code or not source_code.strip():
            raise DeploymentError("There is no source code to deploy.")

        logger.info("deploying", size=len(source_code))
        if self.delay > 0:
            await asyncio.sleep(self.delay)

        if self.rng.random() < self.failure_rate:
            metrics_collector.record_deployment("failed")
            logger.warning("deploy_failed", reason="transient")
            raise DeploymentError(TRANSIENT_FAILURE_MESSAGE)

        url = self._app_url()
        result = DeploymentResult(url=url, qr_code=qr_code_url(url))
        metrics_collector.record_deployment("success")
        logger.info("deployed", deployment=result.id, url=url)
        return result
