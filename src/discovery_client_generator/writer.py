"""Filesystem writers for generated API packages."""

from __future__ import annotations

import logging
from pathlib import Path
import subprocess
import sys
from typing import Optional

from .codegen_ast import (
    CLIENT_MODULE,
    MODEL_PACKAGE,
    REQUEST_MODULE,
    ModuleLayout,
    render_api_package_init,
    render_client_module,
    render_model_module,
    render_model_package_init,
    render_request_module,
)
from .model_types import GeneratedApi
from .naming import schema_module_name

logger = logging.getLogger(__name__)

_GENERATED_RUFF_IGNORE_CODES: tuple[str, ...] = (
    "D100",
    "D101",
    "D102",
    "D103",
    "D104",
    "D205",
    "D301",
    "D415",
    "E501",
    "E741",
)


class WriteError(RuntimeError):
    """Raised when output files cannot be written."""


def package_dir(output_dir: Path, package: str) -> Path:
    """Return the directory holding dotted ``package`` below ``output_dir``."""
    return output_dir.joinpath(*package.split("."))


def render_api_package(api: GeneratedApi) -> dict[Path, str]:
    """Render every module of one generated API, keyed by path below the API package."""
    layout = ModuleLayout.for_api(api)
    selector = f"{api.api_name}:{api.api_version}"
    model_dir = Path(MODEL_PACKAGE)
    sources: dict[Path, str] = {}
    for model in api.models:
        module = schema_module_name(model.name.simple_name)
        sources[model_dir / f"{module}.py"] = render_model_module(model, layout, selector)
    sources[model_dir / "__init__.py"] = render_model_package_init(api, layout)
    sources[Path(f"{REQUEST_MODULE}.py")] = render_request_module(api, layout)
    sources[Path(f"{CLIENT_MODULE}.py")] = render_client_module(api, layout)
    sources[Path("__init__.py")] = render_api_package_init(api, layout)
    return sources


def write_api_package(
    *,
    output_dir: Path,
    api: GeneratedApi,
    sources: Optional[dict[Path, str]] = None,
) -> Path:
    """Write every module of one generated API.

    All modules are rendered before anything is written, unless ``sources``
    already holds them. Parent packages of the API package are created with
    an empty ``__init__.py`` when missing. The API package itself must not
    exist yet.

    Args:
        output_dir (Path): Root output directory.
        api (GeneratedApi): Descriptors of the API to write.
        sources (Optional[dict[Path, str]]): Modules from ``render_api_package``.

    Returns:
        Path: Directory of the written API package.
    """
    api_dir = package_dir(output_dir, api.package)
    if api_dir.exists():
        raise WriteError(f"API package directory already exists: {api_dir}")
    if sources is None:
        sources = render_api_package(api)

    _create_parent_packages(output_dir, api.package)
    model_dir = api_dir / MODEL_PACKAGE
    try:
        model_dir.mkdir(parents=True, exist_ok=False)
    except OSError as exc:
        raise WriteError(f"Failed to create package directory {model_dir}: {exc}") from exc

    for relative_path, source in sources.items():
        _write_file(api_dir / relative_path, source)
    logger.info(
        "Wrote %d models for %s:%s to %s", len(api.models), api.api_name, api.api_version, api_dir
    )
    return api_dir


def format_generated_tree(*, package_path: Path) -> None:
    """Run Ruff auto-fixes and formatter against generated files.

    Args:
        package_path (Path): Generated package directory to format.
    """
    _run_ruff(package_path=package_path, args=("format", str(package_path)))
    _run_ruff(
        package_path=package_path,
        args=(
            "check",
            "--fix",
            "--ignore",
            ",".join(_GENERATED_RUFF_IGNORE_CODES),
            str(package_path),
        ),
    )
    _run_ruff(package_path=package_path, args=("format", str(package_path)))


def _create_parent_packages(output_dir: Path, package: str) -> None:
    parts = package.split(".")[:-1]
    current = output_dir
    for part in parts:
        current = current / part
        try:
            current.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(f"Failed to create package directory {current}: {exc}") from exc
        init_file = current / "__init__.py"
        if not init_file.exists():
            _write_file(init_file, "")


def _run_ruff(*, package_path: Path, args: tuple[str, ...]) -> None:
    command = [sys.executable, "-m", "ruff", *args]
    command_desc = " ".join(args)
    try:
        subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise WriteError(
            f"Failed to execute ruff {command_desc} for {package_path}: {exc}"
        ) from exc
    except subprocess.CalledProcessError as exc:
        error_text = exc.stderr.strip() or exc.stdout.strip() or str(exc)
        raise WriteError(f"ruff {command_desc} failed for {package_path}: {error_text}") from exc


def _write_file(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Failed to write file {path}: {exc}") from exc
