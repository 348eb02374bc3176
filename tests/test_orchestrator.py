import asyncio

import pytest

from linewise.core.config import ExplainSettings, LinewiseSettings, ProviderSettings
from linewise.explain import AvailabilityLatch, ExplanationOrchestrator, classify, explain_locally, split_lines
from linewise.explain.models import FALLBACK, REMOTE, Failed, Success
from linewise.explain.orchestrator import remote_latch
from linewise.explain.remote import RemoteStrategy
from linewise.utils.errors import FallbackError, InputError


class FakeStrategy:
    def __init__(self, result=None, exc: Exception | None = None) -> None:
        self.result = result
        self.exc = exc
        self.calls: list[str] = []

    async def attempt(self, code: str):
        self.calls.append(code)
        if self.exc is not None:
            raise self.exc
        return self.result


def _orchestrator(strategy: FakeStrategy | None) -> ExplanationOrchestrator:
    return ExplanationOrchestrator(AvailabilityLatch.resolved(strategy))


@pytest.mark.asyncio
async def test_end_to_end_without_remote() -> None:
    result = await ExplanationOrchestrator.local_only().explain("const x = 1;\n// comment\n")
    assert result.source == FALLBACK
    assert result.line_numbers() == [1, 2]
    first, second = result.explanations
    assert first["code"] == "const x = 1;"
    assert "const" in first["explanation"] and " x" in first["explanation"]
    assert second["code"] == "// comment"
    assert "comment" in second["explanation"]


@pytest.mark.asyncio
async def test_fallback_keeps_original_line_numbers() -> None:
    result = await ExplanationOrchestrator.local_only().explain("a\n\nb")
    assert len(result) == 2
    assert result.line_numbers() == [1, 3]


@pytest.mark.asyncio
async def test_fallback_matches_classifier_on_every_non_blank_line() -> None:
    code = "function App() {\n  const [n, setN] = useState(0);\n\n  return (\n    <p>{n}</p>\n  );\n}\n"
    lines = split_lines(code)
    expected = [
        {"lineNumber": i + 1, "code": line, "explanation": classify(line, i, lines)}
        for i, line in enumerate(lines)
        if line.strip()
    ]
    result = await _orchestrator(None).explain(code)
    assert result.explanations == expected


@pytest.mark.asyncio
async def test_indentation_is_preserved_in_code() -> None:
    result = await ExplanationOrchestrator.local_only().explain("if (a) {\n    go();\n}")
    assert result.explanations[1]["code"] == "    go();"


@pytest.mark.asyncio
async def test_line_terminators_are_normalised() -> None:
    result = await ExplanationOrchestrator.local_only().explain("a\r\n\r\nb\rc")
    assert result.line_numbers() == [1, 3, 4]
    assert [item["code"] for item in result] == ["a", "b", "c"]


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["", "   ", "\n\n", "\t \r\n"])
async def test_blank_input_is_rejected_before_any_strategy(code: str) -> None:
    strategy = FakeStrategy(Success([]))
    orchestrator = _orchestrator(strategy)
    with pytest.raises(InputError):
        await orchestrator.explain(code)
    assert strategy.calls == []


@pytest.mark.asyncio
async def test_remote_success_is_returned_verbatim() -> None:
    payload = [{"lineNumber": 1, "code": "print(1)", "explanation": "Prints one."}, {"odd": True}]
    strategy = FakeStrategy(Success(payload))
    result = await _orchestrator(strategy).explain("print(1)")
    assert result.source == REMOTE
    assert result.explanations == payload
    assert strategy.calls == ["print(1)"]


@pytest.mark.asyncio
async def test_remote_failure_falls_back_without_merging() -> None:
    strategy = FakeStrategy(Failed("boom"))
    result = await _orchestrator(strategy).explain("let a = 1;")
    assert result.source == FALLBACK
    assert result.explanations == explain_locally("let a = 1;").explanations
    assert len(strategy.calls) == 1


@pytest.mark.asyncio
async def test_unexpected_remote_exception_falls_back() -> None:
    strategy = FakeStrategy(exc=RuntimeError("socket closed"))
    result = await _orchestrator(strategy).explain("let a = 1;")
    assert result.source == FALLBACK
    assert len(result) == 1


@pytest.mark.asyncio
async def test_failing_classifier_raises_fallback_error() -> None:
    def broken(line, index, lines):
        raise KeyError(line)

    orchestrator = ExplanationOrchestrator.local_only(classifier=broken)
    with pytest.raises(FallbackError) as info:
        await orchestrator.explain("x")
    assert isinstance(info.value.__cause__, KeyError)


def test_latch_is_checked_once_per_orchestrator() -> None:
    checks: list[int] = []

    def check():
        checks.append(1)
        return None

    orchestrator = ExplanationOrchestrator(AvailabilityLatch(check))

    async def _run() -> None:
        await orchestrator.explain("a")
        await orchestrator.explain("b")

    asyncio.run(_run())
    assert checks == [1]


@pytest.mark.asyncio
async def test_concurrent_requests_are_independent() -> None:
    orchestrator = ExplanationOrchestrator.local_only()
    results = await asyncio.gather(*(orchestrator.explain(f"let v{i} = {i};") for i in range(5)))
    for i, result in enumerate(results):
        assert f"named v{i}" in result.explanations[0]["explanation"]


@pytest.mark.asyncio
async def test_raising_availability_check_falls_back() -> None:
    def check():
        raise ValueError("bad provider settings")

    orchestrator = ExplanationOrchestrator(AvailabilityLatch(check))
    result = await orchestrator.explain("let a = 1;")
    assert result.source == FALLBACK
    assert result.line_numbers() == [1]


@pytest.mark.asyncio
async def test_byte_order_mark_only_input_is_rejected() -> None:
    with pytest.raises(InputError):
        await ExplanationOrchestrator.local_only().explain("\ufeff\n")


@pytest.mark.parametrize("validate_remote", [True, False])
def test_remote_latch_carries_validation_setting(validate_remote: bool) -> None:
    settings = LinewiseSettings(
        provider=ProviderSettings(api_key="sk-test"),
        explain=ExplainSettings(validate_remote=validate_remote),
    )
    strategy = remote_latch(settings).get()
    assert isinstance(strategy, RemoteStrategy)
    assert strategy.validates is validate_remote


def test_remote_latch_without_key_is_unavailable() -> None:
    settings = LinewiseSettings(explain=ExplainSettings(validate_remote=True))
    assert remote_latch(settings).get() is None
