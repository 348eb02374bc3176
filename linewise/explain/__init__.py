"""Line-by-line explanation engine."""
from __future__ import annotations

from linewise.explain.availability import AvailabilityLatch
from linewise.explain.classifier import BLANK, classify
from linewise.explain.models import Explanation, ExplanationSet, split_lines
from linewise.explain.orchestrator import ExplanationOrchestrator, explain_locally, remote_latch
from linewise.explain.remote import RemoteStrategy

__all__ = [
    "AvailabilityLatch",
    "BLANK",
    "Explanation",
    "ExplanationOrchestrator",
    "ExplanationSet",
    "RemoteStrategy",
    "classify",
    "explain_locally",
    "remote_latch",
    "split_lines",
]
