import json

import httpx
import pytest

from app.core.config import settings
from app.runner.jdoodle import (
    ExecutionConfigError, ExecutionTransportError, JDoodleRunner, create_runner_from_settings
)

pytestmark = pytest.mark.asyncio


def _runner(handler) -> JDoodleRunner:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return JDoodleRunner(client_id="id", client_secret="secret", api_url="https://runner.test/execute",
                         http_client=http_client)


async def test_sends_fixed_runtime_and_parses_output():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"output": "7\n", "statusCode": 200, "cpuTime": "0.05", "memory": "1024"})

    result = await _runner(handler).run("console.log(7)", "3\n4")

    assert result.output == "7\n"
    assert result.status_code == 200
    assert result.cpu_time == "0.05"
    assert seen == {
        "clientId": "id", "clientSecret": "secret", "script": "console.log(7)",
        "stdin": "3\n4", "language": "nodejs", "versionIndex": "4",
    }


async def test_provider_status_code_is_passed_through():
    result = await _runner(lambda request: httpx.Response(200, json={"output": None, "statusCode": 400})).run("x", "")

    assert result.status_code == 400
    assert result.output == ""


async def test_http_error_is_a_transport_error():
    runner = _runner(lambda request: httpx.Response(429, text="Daily limit reached"))

    with pytest.raises(ExecutionTransportError, match="429"):
        await runner.run("x", "")


async def test_connection_failure_is_a_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExecutionTransportError):
        await _runner(handler).run("x", "")


async def test_non_json_body_is_a_transport_error():
    with pytest.raises(ExecutionTransportError):
        await _runner(lambda request: httpx.Response(200, text="<html>oops</html>")).run("x", "")


def test_missing_credentials_is_a_config_error(monkeypatch):
    monkeypatch.setattr(settings, "JDOODLE_CLIENT_ID", None)
    with pytest.raises(ExecutionConfigError, match="misconfiguration"):
        create_runner_from_settings()
