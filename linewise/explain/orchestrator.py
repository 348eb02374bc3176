"""Explanation orchestrator: remote model first, local classifier second."""
from __future__ import annotations

from typing import Callable, Optional, Sequence

from linewise.core.config import LinewiseSettings
from linewise.core.model import create_provider
from linewise.explain.availability import AvailabilityLatch
from linewise.explain.classifier import BLANK, classify, trim_line
from linewise.explain.models import (
    FALLBACK,
    REMOTE,
    Explanation,
    ExplanationSet,
    Failed,
    StrategyResult,
    Success,
    Unavailable,
    split_lines,
)
from linewise.explain.remote import RemoteStrategy
from linewise.utils.errors import FallbackError, InputError
from linewise.utils.logging import get_logger

logger = get_logger(__name__)

Classifier = Callable[[str, int, Sequence[str]], str]


def remote_latch(settings: LinewiseSettings) -> AvailabilityLatch[RemoteStrategy]:
    """Return a latch that builds the remote strategy from ``settings`` once."""

    def _check() -> Optional[RemoteStrategy]:
        provider = create_provider(settings.provider)
        if provider is None:
            return None
        return RemoteStrategy(provider, validate=settings.explain.validate_remote)

    return AvailabilityLatch(_check)


def explain_locally(code: str, classifier: Classifier = classify) -> ExplanationSet:
    """Classify every line of ``code`` and drop the blank ones.

    Line numbers are positions in the unfiltered input, so dropped lines
    leave gaps.
    """

    lines = split_lines(code)
    explanations = []
    for index, line in enumerate(lines):
        sentence = classifier(line, index, lines)
        if sentence == BLANK:
            continue
        explanations.append(Explanation(line_number=index + 1, code=line, explanation=sentence).to_dict())
    return ExplanationSet(explanations=explanations, source=FALLBACK)


class ExplanationOrchestrator:
    """Produce an :class:`ExplanationSet` for a snippet.

    The remote strategy is taken from ``latch``; a latch resolving to ``None``
    means the model is not configured and every call goes straight to the
    local classifier. A remote failure of any kind is logged and absorbed.
    Only blank input (:class:`InputError`) and a failing local path
    (:class:`FallbackError`) reach the caller.
    """

    def __init__(
        self,
        latch: AvailabilityLatch[RemoteStrategy],
        *,
        classifier: Classifier = classify,
    ) -> None:
        self._latch = latch
        self._classifier = classifier

    @classmethod
    def local_only(cls, *, classifier: Classifier = classify) -> "ExplanationOrchestrator":
        return cls(AvailabilityLatch.resolved(None), classifier=classifier)

    async def explain(self, code: str) -> ExplanationSet:
        if not code or not trim_line(code):
            raise InputError("Code is required")

        result = await self._attempt_remote(code)
        if isinstance(result, Success):
            logger.info("served by remote model", extra={"strategy": REMOTE, "lines": len(result.explanations)})
            return ExplanationSet(explanations=result.explanations, source=REMOTE)
        if isinstance(result, Failed):
            logger.warning("remote explanation failed, using local analysis", extra={"reason": result.reason})
        else:
            logger.debug("remote explanation unavailable", extra={"reason": result.reason})

        try:
            explanations = explain_locally(code, self._classifier)
        except Exception as exc:
            logger.exception("local analysis failed")
            raise FallbackError("Failed to explain code") from exc
        logger.info("served by local analysis", extra={"strategy": FALLBACK, "lines": len(explanations)})
        return explanations

    async def _attempt_remote(self, code: str) -> StrategyResult:
        try:
            strategy = self._latch.get()
            if strategy is None:
                return Unavailable()
            return await strategy.attempt(code)
        except Exception as exc:
            return Failed(reason=f"{type(exc).__name__}: {exc}")


__all__ = ["ExplanationOrchestrator", "explain_locally", "remote_latch"]
