"""Remote model strategy: ask a language model for the explanations."""
from __future__ import annotations

import json
import re
from typing import Any, List

from pydantic import ValidationError

from linewise.core.model import BaseProvider, Messages
from linewise.explain.models import Failed, RemoteExplanation, StrategyResult, Success
from linewise.utils.errors import ProviderError
from linewise.utils.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a Universal Code Explainer who can analyze and explain code in any programming "
    "language (JavaScript, Python, Java, C#, C++, Go, Rust, SQL, HTML/CSS, etc.). Always return "
    "valid JSON. Adapt your explanations to the specific language and framework being used."
)

_PROMPT_TEMPLATE = """You are a Universal Code Explainer. Analyze the following code and provide a line-by-line explanation.

IMPORTANT: Detect the programming language automatically and adapt your explanation accordingly.

For each non-empty line, provide:
1. The line number
2. The exact code
3. A clear, educational explanation of what the line does and why it's important

Focus on:
- Language-specific concepts and patterns
- Framework-specific features (if applicable)
- Code structure and flow
- Best practices for that language
- Common pitfalls and gotchas
- Performance considerations

Code to analyze:
```
{code}
```

Return your response as a JSON array where each object has:
- lineNumber: number
- code: string (exact line)
- explanation: string (clear explanation)

Skip empty lines. Be educational and help developers understand both the "what" and "why". Make explanations beginner-friendly but comprehensive."""

_FENCE_RE = re.compile(r"^```[\w-]*\s*\n(.*)\n\s*```$", re.DOTALL)


def build_messages(code: str) -> Messages:
    """Return the chat messages describing ``code`` and the reply shape."""

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": _PROMPT_TEMPLATE.format(code=code)},
    ]


def parse_reply(text: str, *, validate: bool = False) -> List[Any]:
    """Parse a model reply into the explanation array.

    A surrounding Markdown fence is tolerated. Raises ``ValueError`` when the
    reply is not a JSON array, or, with ``validate``, when an element does not
    have the ``{lineNumber, code, explanation}`` shape.
    """

    body = text.strip()
    fenced = _FENCE_RE.match(body)
    if fenced:
        body = fenced.group(1)
    data = json.loads(body)
    if not isinstance(data, list):
        raise ValueError("Invalid response format: expected a JSON array")
    if validate:
        try:
            return [RemoteExplanation.model_validate(item).model_dump() for item in data]
        except ValidationError as exc:
            raise ValueError(f"Invalid explanation element: {exc}") from exc
    return data


class RemoteStrategy:
    """Make exactly one provider call and report the outcome.

    Provider and parse failures are returned as :class:`Failed`; this class
    never raises them.
    """

    def __init__(self, provider: BaseProvider, *, validate: bool = False) -> None:
        self._provider = provider
        self._validate = validate

    @property
    def validates(self) -> bool:
        """Whether reply elements are checked against the explanation shape."""
        return self._validate

    async def attempt(self, code: str) -> StrategyResult:
        try:
            reply = await self._provider.complete(build_messages(code))
        except ProviderError as exc:
            return Failed(reason=str(exc))
        try:
            explanations = parse_reply(reply, validate=self._validate)
        except ValueError as exc:
            return Failed(reason=f"unparseable model reply: {exc}")
        return Success(explanations=explanations)


__all__ = ["RemoteStrategy", "build_messages", "parse_reply", "SYSTEM_PROMPT"]
