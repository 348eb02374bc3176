"""Linewise: line-by-line code explanations."""
from __future__ import annotations

__version__ = "0.1.0"
__app_name__ = "linewise"

__all__ = ["__version__", "__app_name__"]
