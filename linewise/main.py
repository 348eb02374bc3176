"""Main entrypoint initialising the Linewise runtime."""
from __future__ import annotations

from typing import Optional

from linewise.cli.app import RuntimeContext, app, set_runtime
from linewise.core.config import ConfigManager
from linewise.core.ui import ExplainUI
from linewise.explain.orchestrator import ExplanationOrchestrator, remote_latch
from linewise.utils.errors import ConfigurationError
from linewise.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def build_runtime(config_manager: Optional[ConfigManager] = None) -> RuntimeContext:
    """Load settings and wire the orchestrator used for the whole process.

    The remote availability latch is created here exactly once, so the
    provider check happens at most once per process.
    """

    config_manager = config_manager or ConfigManager()
    settings = config_manager.load()
    orchestrator = ExplanationOrchestrator(remote_latch(settings))
    ui = ExplainUI(theme=settings.ui.theme, enable_progress=settings.ui.enable_progress)
    return RuntimeContext(
        settings=settings,
        config_manager=config_manager,
        orchestrator=orchestrator,
        ui=ui,
    )


def main() -> None:
    try:
        context = build_runtime()
    except ConfigurationError as exc:
        ExplainUI().error(f"Configuration error: {exc}")
        raise SystemExit(2) from exc
    log_settings = context.settings.logging
    configure_logging(
        level=log_settings.level,
        console_level=log_settings.console_level,
        log_file=log_settings.file,
        log_dir=log_settings.directory,
    )
    set_runtime(context)
    logger.debug("runtime initialised")
    app()


if __name__ == "__main__":
    main()
