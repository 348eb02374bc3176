import json

import pytest

from linewise.explain import AvailabilityLatch, ExplanationOrchestrator
from linewise.ui import ExplainWebAPI


@pytest.fixture()
def api() -> ExplainWebAPI:
    return ExplainWebAPI(ExplanationOrchestrator.local_only())


@pytest.mark.asyncio
async def test_explain_success(api: ExplainWebAPI) -> None:
    status, headers, body = await api.dispatch("POST", "/api/explain", json.dumps({"code": "let a = 1;\n\n// done"}))
    assert status == 200
    assert headers["Content-Type"] == "application/json"
    assert headers["Content-Length"] == str(len(body.encode("utf-8")))
    payload = json.loads(body)
    assert [item["lineNumber"] for item in payload["explanations"]] == [1, 3]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["", "{not json", "[]", '{"code": 5}', '{"code": "   "}', "{}"])
async def test_bad_requests_are_client_errors(api: ExplainWebAPI, body: str) -> None:
    status, _, payload = await api.dispatch("POST", "/api/explain", body)
    assert status == 400
    assert json.loads(payload) == {"error": "Code is required"}


@pytest.mark.asyncio
async def test_fallback_failure_is_a_server_error() -> None:
    def broken(line, index, lines):
        raise RuntimeError("rules exploded")

    api = ExplainWebAPI(ExplanationOrchestrator.local_only(classifier=broken))
    status, _, payload = await api.dispatch("POST", "/api/explain", json.dumps({"code": "x"}))
    assert status == 500
    assert json.loads(payload) == {"error": "Failed to explain code"}


@pytest.mark.asyncio
async def test_ping_uses_environment(api: ExplainWebAPI, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PING_MESSAGE", raising=False)
    status, _, payload = await api.dispatch("GET", "/api/ping")
    assert (status, json.loads(payload)) == (200, {"message": "ping"})
    monkeypatch.setenv("PING_MESSAGE", "pong")
    _, _, payload = await api.dispatch("get", "/api/ping")
    assert json.loads(payload) == {"message": "pong"}


@pytest.mark.asyncio
async def test_unknown_route(api: ExplainWebAPI) -> None:
    status, _, payload = await api.dispatch("GET", "/api/explain")
    assert status == 404
    assert json.loads(payload) == {"error": "not found"}


@pytest.mark.asyncio
async def test_raising_availability_check_still_answers() -> None:
    def check():
        raise RuntimeError("provider construction failed")

    api = ExplainWebAPI(ExplanationOrchestrator(AvailabilityLatch(check)))
    status, _, payload = await api.dispatch("POST", "/api/explain", json.dumps({"code": "let a = 1;"}))
    assert status == 200
    assert [item["lineNumber"] for item in json.loads(payload)["explanations"]] == [1]
