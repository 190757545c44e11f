"""Helpers for importing generated Python packages."""

from __future__ import annotations

import importlib
from pathlib import Path
import sys
from types import ModuleType


def import_generated_module(*, output_dir: Path, module_name: str) -> ModuleType:
    """Import ``module_name`` from a generated tree rooted at ``output_dir``.

    Modules previously imported under the same top-level package are dropped
    first so a regenerated tree is never shadowed by a stale import.

    Args:
        output_dir (Path): Root directory of the generated tree.
        module_name (str): Dotted module name below ``output_dir``.

    Returns:
        ModuleType: Imported Python module object.
    """
    root = module_name.split(".", maxsplit=1)[0]
    for loaded in [name for name in sys.modules if name == root or name.startswith(f"{root}.")]:
        sys.modules.pop(loaded, None)
    importlib.invalidate_caches()

    search_path = str(output_dir)
    sys.path.insert(0, search_path)
    try:
        return importlib.import_module(module_name)
    finally:
        sys.path.remove(search_path)
