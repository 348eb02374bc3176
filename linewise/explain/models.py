"""Data types shared by the explanation strategies."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Union

from pydantic import BaseModel, Field

REMOTE = "remote"
FALLBACK = "fallback"


def split_lines(code: str) -> List[str]:
    """Normalise line terminators and split ``code`` into lines.

    Lines keep their indentation and a trailing newline yields a final empty
    line, so positions always match what an editor shows.
    """

    return code.replace("\r\n", "\n").replace("\r", "\n").split("\n")


@dataclass
class Explanation:
    """One explained line.

    Attributes:
        line_number: 1-based position in the unfiltered input.
        code: The original line, untouched.
        explanation: Natural-language sentence describing the line.
    """

    line_number: int
    code: str
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lineNumber": self.line_number,
            "code": self.code,
            "explanation": self.explanation,
        }


class RemoteExplanation(BaseModel):
    """Shape a model reply element must have when validation is enabled."""

    lineNumber: int = Field(ge=1)
    code: str
    explanation: str


@dataclass
class ExplanationSet:
    """Ordered explanations for one request, tagged with their source.

    ``explanations`` holds wire-shaped dicts. Remote entries are kept exactly
    as the model returned them.
    """

    explanations: List[Dict[str, Any]] = field(default_factory=list)
    source: str = FALLBACK

    def __len__(self) -> int:
        return len(self.explanations)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.explanations)

    def line_numbers(self) -> List[Any]:
        return [item.get("lineNumber") if isinstance(item, dict) else None for item in self.explanations]

    def to_dict(self) -> Dict[str, Any]:
        """Return the response payload ``{"explanations": [...]}``."""
        return {"explanations": list(self.explanations)}


# ---------------------------------------------------------------------------
# Strategy results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Success:
    explanations: List[Dict[str, Any]]


@dataclass(frozen=True)
class Unavailable:
    reason: str = "remote strategy not configured"


@dataclass(frozen=True)
class Failed:
    reason: str


StrategyResult = Union[Success, Unavailable, Failed]


__all__ = [
    "Explanation",
    "ExplanationSet",
    "RemoteExplanation",
    "StrategyResult",
    "Success",
    "Unavailable",
    "Failed",
    "split_lines",
    "REMOTE",
    "FALLBACK",
]
