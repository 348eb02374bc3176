"""Outward-facing surfaces of the explanation engine."""
from __future__ import annotations

from linewise.ui.web import ExplainWebAPI

__all__ = ["ExplainWebAPI"]
