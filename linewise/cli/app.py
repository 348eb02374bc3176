"""Typer-based CLI wiring."""
from __future__ import annotations

import asyncio
import contextlib
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from linewise.core.config import ConfigManager, LinewiseSettings
from linewise.core.ui import ExplainUI
from linewise.explain.classifier import BLANK, classify, match_rule
from linewise.explain.orchestrator import ExplanationOrchestrator
from linewise.utils.errors import FallbackError, InputError
from linewise.utils.logging import get_logger

logger = get_logger(__name__)

app = typer.Typer(help="Explain source code line by line")
config_app = typer.Typer(help="Inspect configuration")
app.add_typer(config_app, name="config")


@dataclass
class RuntimeContext:
    settings: LinewiseSettings
    config_manager: ConfigManager
    orchestrator: ExplanationOrchestrator
    ui: ExplainUI


runtime: Optional[RuntimeContext] = None


def set_runtime(value: RuntimeContext) -> None:
    global runtime
    runtime = value


def _require_runtime() -> RuntimeContext:
    if runtime is None:  # pragma: no cover - runtime is always set during CLI usage
        raise RuntimeError("Runtime not initialised")
    return runtime


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    source = Path(path)
    if not source.is_file():
        raise typer.BadParameter(f"File not found: {path}", param_hint="PATH")
    return source.read_text(encoding="utf-8-sig", errors="replace")


@app.command()
def explain(
    path: str = typer.Argument(..., help="File to explain, or '-' to read stdin"),
    output_json: bool = typer.Option(False, "--json", help="Print the response JSON instead of a table"),
    local: bool = typer.Option(False, "--local", help="Skip the model and use local analysis only"),
) -> None:
    """Explain every non-blank line of a file."""

    ctx = _require_runtime()
    code = _read_source(path)
    orchestrator = ExplanationOrchestrator.local_only() if local else ctx.orchestrator

    async def _run():
        with ctx.ui.spinner("Explaining…") if not output_json else contextlib.nullcontext():
            return await orchestrator.explain(code)

    try:
        result = asyncio.run(_run())
    except InputError as exc:
        ctx.ui.error(str(exc))
        raise typer.Exit(code=2)
    except FallbackError as exc:
        ctx.ui.error(str(exc))
        raise typer.Exit(code=1)

    if output_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        ctx.ui.render(result, title=path)


@app.command("classify")
def classify_command(line: str = typer.Argument(..., help="A single line of code")) -> None:
    """Explain one line with the local pattern rules."""

    ctx = _require_runtime()
    sentence = classify(line, 0, [line])
    if sentence == BLANK:
        ctx.ui.warn("Blank line: nothing to explain.")
        return
    rule = match_rule(line)
    ctx.ui.info(f"[{rule.name if rule else 'statement'}] {sentence}")


@config_app.command("show")
def config_show() -> None:
    """Print the effective settings with the API key masked."""

    ctx = _require_runtime()
    data = ctx.settings.model_dump(mode="json")
    if data["provider"].get("api_key"):
        data["provider"]["api_key"] = "***"
    typer.echo(json.dumps(data, indent=2))


__all__ = ["app", "RuntimeContext", "set_runtime"]
