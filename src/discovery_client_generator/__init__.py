"""Generate typed Python API clients from discovery documents."""

from __future__ import annotations

from .cli import main
from .generator import GenerationRun, generate_api, run_generation

__all__ = ["GenerationRun", "generate_api", "main", "run_generation"]
