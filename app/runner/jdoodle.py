import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from app.core.config import settings

logger = logging.getLogger(__name__)


class ExecutionResult(BaseModel):
    output: str = ""
    status_code: int = 200
    cpu_time: Optional[str] = None
    memory: Optional[str] = None


class ExecutionTransportError(Exception):
    """The provider could not be reached or answered with an HTTP error."""


class ExecutionConfigError(Exception):
    """Provider credentials are not configured."""


class JDoodleRunner:
    """
    Client for a JDoodle-compatible execution API. Always runs the one configured
    runtime; the caller only supplies the program text and its stdin.
    """

    def __init__(
            self,
            client_id: str,
            client_secret: str,
            api_url: str = "https://api.jdoodle.com/v1/execute",
            language: str = "nodejs",
            version_index: str = "4",
            timeout_sec: float = 30.0,
            http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_url = api_url
        self.language = language
        self.version_index = version_index
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_sec)

    async def run(self, code: str, stdin: str) -> ExecutionResult:
        payload = {
            "clientId": self.client_id,
            "clientSecret": self.client_secret,
            "script": code,
            "stdin": stdin,
            "language": self.language,
            "versionIndex": self.version_index,
        }
        try:
            response = await self._client.post(self.api_url, json=payload)
        except httpx.HTTPError as e:
            raise ExecutionTransportError(f"Execution provider request failed: {e}") from e

        if response.is_error:
            raise ExecutionTransportError(f"Execution provider HTTP {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ExecutionTransportError("Execution provider returned a non-JSON response.") from e

        status_code = data.get("statusCode")
        return ExecutionResult(
            output=data.get("output") or "",
            status_code=200 if status_code is None else int(status_code),
            cpu_time=None if data.get("cpuTime") is None else str(data.get("cpuTime")),
            memory=None if data.get("memory") is None else str(data.get("memory")),
        )

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "JDoodleRunner":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()


def create_runner_from_settings() -> JDoodleRunner:
    if not settings.JDOODLE_CLIENT_ID or not settings.JDOODLE_CLIENT_SECRET:
        logger.error("JDoodle credentials are not configured.")
        raise ExecutionConfigError("Server misconfiguration: JDoodle credentials not set.")

    return JDoodleRunner(
        client_id=settings.JDOODLE_CLIENT_ID,
        client_secret=settings.JDOODLE_CLIENT_SECRET,
        api_url=settings.JDOODLE_API_URL,
        language=settings.JDOODLE_LANGUAGE,
        version_index=settings.JDOODLE_VERSION_INDEX,
        timeout_sec=settings.EXECUTION_TIMEOUT_SEC,
    )
