"""Local pattern classifier used when no model is available.

Each line is matched against an ordered list of rules and described by the
first rule that matches. The list is a priority order: several patterns
overlap (a ``const`` holding an arrow function is reported as a variable
declaration because that rule comes first).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from linewise.utils.logging import get_logger

logger = get_logger(__name__)

BLANK = ""

_EDGE_RE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")

FALLBACK_SENTENCE = (
    "Executes this statement as part of the component's logic. This line contributes "
    "to the overall functionality and behavior of the code."
)


@dataclass(frozen=True)
class LineContext:
    """The trimmed line being classified plus its neighbours."""

    text: str
    index: int
    lines: Sequence[str]

    @property
    def previous(self) -> Optional[str]:
        """The raw previous line, or ``None`` for the first line."""
        if 0 < self.index <= len(self.lines):
            return self.lines[self.index - 1]
        return None


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Callable[[str], bool]
    explain: Callable[[LineContext], str]


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_IMPORT_RE = re.compile(r"^import\s+")
_IMPORT_FROM_RE = re.compile(r"^import\s+(.*)\s+from\s+[\"'`](.*)[\"'`]")
_EXPORT_FUNCTION_RE = re.compile(r"^export\s+function\s+([^(\s]+)?")
_FUNCTION_RE = re.compile(r"^function\s+([^(\s]+)?")
_USE_STATE_RE = re.compile(r"^const\s+\[.*\]\s*=\s*useState\(")
_STATE_NAMES_RE = re.compile(r"^const\s+\[([^,]+),\s*([^\]]+)\]")
_PROPS_DESTRUCTURE_RE = re.compile(r"^const\s+\{.*\}\s*=\s*props")
_VARIABLE_RE = re.compile(r"^(const|let|var)\s+")
_VARIABLE_NAME_RE = re.compile(r"^(const|let|var)\s+([^{=\s]+)")
_PROPS_ACCESS_RE = re.compile(r"props\.")
_ARROW_OPENER_RE = re.compile(r"=>\s*\{?$")
_IF_RE = re.compile(r"^if\s*\(")
_FOR_RE = re.compile(r"^for\s*\(")
_TAG_RE = re.compile(r"^<\w+")
_SETTER_RE = re.compile(r"set[A-Z]")
_CALL_RE = re.compile(r"\(.*\)")
_RETURN_VALUE_RE = re.compile(r"^return\s+")


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


def _explain_import(ctx: LineContext) -> str:
    match = _IMPORT_FROM_RE.match(ctx.text)
    if match:
        return (
            f'Imports {match.group(1).strip()} from the module "{match.group(2)}". '
            "This makes the imported functionality available for use in this file."
        )
    return "Imports external dependencies needed in this file. Import statements must come before other code."


def _explain_export_function(ctx: LineContext) -> str:
    match = _EXPORT_FUNCTION_RE.match(ctx.text)
    if match and match.group(1):
        return (
            f"Exports a function component named {match.group(1)}, making it available to other "
            "files that import this module. This is a common pattern in React applications."
        )
    return (
        "Exports a function so it can be imported and used in other files. "
        "This enables code reusability across your application."
    )


def _explain_function(ctx: LineContext) -> str:
    match = _FUNCTION_RE.match(ctx.text)
    if match and match.group(1):
        return (
            f"Defines a function called {match.group(1)} that can be called later. "
            "Functions encapsulate reusable logic and help organize code."
        )
    return "Defines a function that groups related code together. Functions help make code more organized and reusable."


def _explain_state(ctx: LineContext) -> str:
    match = _STATE_NAMES_RE.match(ctx.text)
    if match:
        value, setter = match.group(1).strip(), match.group(2).strip()
        return (
            f"Creates a React state variable {value} and its setter function {setter} using the "
            "useState hook. State allows components to store and update data that triggers "
            "re-renders when changed."
        )
    return (
        "Initializes React state using the useState hook. State is essential for creating "
        "interactive components that can change over time."
    )


def _explain_variable(ctx: LineContext) -> str:
    match = _VARIABLE_NAME_RE.match(ctx.text)
    if match:
        keyword, name = match.group(1), match.group(2)
        return (
            f"Declares a {keyword} variable named {name}. "
            f"{keyword} determines the variable's scope and reassignment behavior."
        )
    return "Declares a variable to store a value. Variables are fundamental building blocks for storing and manipulating data."


def _explain_closing_paren(ctx: LineContext) -> str:
    previous = ctx.previous
    if previous is not None and trim_line(previous).startswith("return"):
        return "Closes the JSX return statement. This completes the component's render output."
    return (
        "Closes a grouped expression or function call. "
        "Parentheses help organize complex expressions and function arguments."
    )


def _explain_closing_brace(ctx: LineContext) -> str:
    previous = ctx.previous
    if previous is not None and "return" in previous:
        return (
            "Closes the component or function definition. "
            "This marks the end of the component's logic and structure."
        )
    return (
        "Closes a code block, function, or object. "
        "Braces define the scope and boundaries of different code sections."
    )


def trim_line(line: str) -> str:
    """Strip surrounding whitespace, byte-order marks included."""
    return _EDGE_RE.sub("", line)


def _fixed(sentence: str) -> Callable[[LineContext], str]:
    return lambda _ctx: sentence


def _search(pattern: re.Pattern[str]) -> Callable[[str], bool]:
    return lambda text: pattern.search(text) is not None


def _contains(fragment: str) -> Callable[[str], bool]:
    return lambda text: fragment in text


# ---------------------------------------------------------------------------
# Rule table (priority order)
# ---------------------------------------------------------------------------

RULES: list[Rule] = [
    Rule("blank", lambda text: not text, _fixed(BLANK)),
    Rule(
        "line_comment",
        lambda text: text.startswith("//"),
        _fixed(
            "This is a comment that documents the code for human developers. "
            "Comments help explain the 'why' behind the code logic."
        ),
    ),
    Rule(
        "block_comment",
        lambda text: text.startswith("/*"),
        _fixed(
            "This starts a multi-line comment block. These comments can span multiple lines "
            "and are useful for detailed documentation."
        ),
    ),
    Rule("import", _search(_IMPORT_RE), _explain_import),
    Rule("export_function", _search(_EXPORT_FUNCTION_RE), _explain_export_function),
    Rule("function", _search(_FUNCTION_RE), _explain_function),
    Rule("state_hook", _search(_USE_STATE_RE), _explain_state),
    Rule(
        "props_destructure",
        _search(_PROPS_DESTRUCTURE_RE),
        _fixed(
            "Destructures specific properties from the props object. This is a common pattern "
            "that makes props easier to use by extracting only the values you need."
        ),
    ),
    Rule("variable", _search(_VARIABLE_RE), _explain_variable),
    Rule(
        "effect_hook",
        _contains("useEffect("),
        _fixed(
            "Sets up a React effect hook to perform side effects after the component renders. "
            "Effects are perfect for API calls, subscriptions, or DOM manipulation."
        ),
    ),
    Rule(
        "memo_hook",
        _contains("useMemo("),
        _fixed(
            "Uses the useMemo hook to memoize an expensive calculation. This optimization "
            "prevents unnecessary recalculations when dependencies haven't changed."
        ),
    ),
    Rule(
        "callback_hook",
        _contains("useCallback("),
        _fixed(
            "Uses the useCallback hook to memoize a function. This prevents the function from "
            "being recreated on every render, which can help with performance optimization."
        ),
    ),
    Rule(
        "props_access",
        _search(_PROPS_ACCESS_RE),
        _fixed(
            "Accesses data from the component's props. Props are how parent components pass "
            "data down to child components in React."
        ),
    ),
    Rule(
        "return_block",
        lambda text: text.startswith("return (") or text == "return",
        _fixed(
            "Begins the JSX return statement that defines what the component will render. "
            "JSX allows you to write HTML-like syntax in JavaScript."
        ),
    ),
    Rule(
        "return_null",
        lambda text: text == "return null;",
        _fixed(
            "Returns null to render nothing from this component. This is useful for conditional "
            "rendering when you want to hide the component completely."
        ),
    ),
    Rule(
        "arrow_function",
        _search(_ARROW_OPENER_RE),
        _fixed(
            "Defines an arrow function, commonly used for event handlers, callbacks, or inline "
            "functions. Arrow functions have a more concise syntax than regular functions."
        ),
    ),
    Rule(
        "if",
        _search(_IF_RE),
        _fixed(
            "Starts a conditional statement that executes code only when the specified condition "
            "is true. Conditionals are essential for creating dynamic, responsive applications."
        ),
    ),
    Rule(
        "for",
        _search(_FOR_RE),
        _fixed(
            "Begins a for loop that repeats code multiple times. Loops are powerful tools for "
            "processing arrays, objects, or any collection of data."
        ),
    ),
    Rule(
        "ref",
        _contains("useRef("),
        _fixed(
            "Creates a React ref that provides direct access to DOM elements or stores mutable "
            "values that persist between renders without causing re-renders."
        ),
    ),
    Rule(
        "array_map",
        lambda text: "map(" in text and "=>" in text,
        _fixed(
            "Uses the map function to transform each item in an array into JSX elements. "
            "This is the standard React pattern for rendering lists of data."
        ),
    ),
    Rule(
        "markup",
        lambda text: "className=" in text or _TAG_RE.search(text) is not None,
        _fixed(
            "Defines JSX elements that will be rendered to the DOM. JSX combines the power of "
            "JavaScript with the familiarity of HTML syntax."
        ),
    ),
    Rule("closing_paren", lambda text: text.startswith(")"), _explain_closing_paren),
    Rule("closing_brace", lambda text: text.startswith("}"), _explain_closing_brace),
    Rule(
        "setter_call",
        lambda text: _SETTER_RE.search(text) is not None and _CALL_RE.search(text) is not None,
        _fixed(
            "Calls a state setter function to update component state. When state changes, React "
            "automatically re-renders the component to reflect the new values."
        ),
    ),
    # Unreachable: closing_brace matches first.
    Rule(
        "closing_statement",
        lambda text: text in ("};", "});"),
        _fixed(
            "Closes a function or object definition. "
            "This completes the definition and makes it available for use."
        ),
    ),
    Rule(
        "return_value",
        _search(_RETURN_VALUE_RE),
        _fixed(
            "Returns a value from the current function. "
            "Return statements specify what the function produces when called."
        ),
    ),
]


def match_rule(line: str) -> Optional[Rule]:
    """Return the first rule matching ``line``, or ``None`` for the catch-all."""

    text = trim_line(line)
    for rule in RULES:
        if rule.matches(text):
            return rule
    return None


def classify(line: str, index: int, all_lines: Sequence[str]) -> str:
    """Explain one line of code.

    Args:
        line: The raw line; surrounding whitespace is ignored.
        index: 0-based position of ``line`` inside ``all_lines``.
        all_lines: Every line of the snippet, used for the one-line lookback
            of closing brackets.

    Returns:
        A sentence describing the line, or :data:`BLANK` for blank lines.
    """

    ctx = LineContext(text=trim_line(line), index=index, lines=all_lines)
    rule = match_rule(line)
    if rule is None:
        return FALLBACK_SENTENCE
    return rule.explain(ctx)


__all__ = ["trim_line", "BLANK", "FALLBACK_SENTENCE", "RULES", "Rule", "LineContext", "classify", "match_rule"]
