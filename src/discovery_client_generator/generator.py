"""High-level generator orchestration."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Optional

from .assembler import assemble
from .config import GeneratorConfig
from .discovery import RestDescription
from .errors import ApiGenerationError, GenerationError
from .loader import (
    DiscoveryLoadError,
    find_discovery_document,
    load_discovery_document,
    parse_api_selector,
)
from .model_types import ClassDef, GeneratedApi, GenerationResult, ModelCheckItem
from .verify import VerificationReport, verify_models
from .writer import WriteError, format_generated_tree, render_api_package, write_api_package

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRun:
    """Generation result with optional verification report."""

    result: GenerationResult
    verification_report: Optional[VerificationReport]


def resolve_input_paths(config: GeneratorConfig) -> list[Path]:
    """Return the discovery documents a configuration selects.

    Args:
        config (GeneratorConfig): Effective generator settings.

    Returns:
        list[Path]: Document paths, ``input`` first, then ``apis`` in order.
    """
    paths: list[Path] = []
    if config.input is not None:
        paths.append(config.input)
    if config.apis:
        if config.input_dir is None:
            raise DiscoveryLoadError("Selecting APIs by name:version requires an input directory")
        for selector in config.apis:
            name, version = parse_api_selector(selector)
            paths.append(find_discovery_document(config.input_dir, name, version))
    if not paths:
        raise DiscoveryLoadError("No discovery document selected")
    return paths


def generate_api(description: RestDescription, *, base_package: str) -> GeneratedApi:
    """Build the descriptors of one API.

    Args:
        description (RestDescription): Validated API description.
        base_package (str): Dotted package the API package is placed in.

    Returns:
        GeneratedApi: Every descriptor generated for the API.
    """
    try:
        return assemble(description, base_package)
    except GenerationError as exc:
        raise ApiGenerationError(description.selector, exc) from exc


def run_generation(
    *,
    input_paths: list[Path],
    output_dir: Path,
    base_package: str,
    verify: bool,
) -> GenerationRun:
    """Generate client packages from discovery documents.

    All APIs are assembled and rendered before any file is written, so a
    structural error in one document leaves the output directory untouched.

    Args:
        input_paths (list[Path]): Discovery documents to generate from.
        output_dir (Path): Directory where generated packages are written.
        base_package (str): Dotted package every API package is placed in.
        verify (bool): Whether to run model verification after generation.

    Returns:
        GenerationRun: Generation metadata and optional verification report.
    """
    descriptions = [load_discovery_document(path) for path in input_paths]
    apis = [generate_api(description, base_package=base_package) for description in descriptions]
    rendered = [render_api_package(api) for api in apis]

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(f"Failed to create output directory {output_dir}: {exc}") from exc

    check_items: list[ModelCheckItem] = []
    warnings: list[str] = []
    for description, api, sources in zip(descriptions, apis, rendered):
        api_dir = write_api_package(output_dir=output_dir, api=api, sources=sources)
        format_generated_tree(package_path=api_dir)
        check_items.extend(_check_items(description, api))
        warnings.extend(f"{description.selector}: {warning}" for warning in api.warnings)

    result = GenerationResult(
        output_dir=str(output_dir),
        apis=tuple(apis),
        check_items=tuple(check_items),
        warnings=tuple(warnings),
    )
    logger.info("Generated %d APIs into %s", len(apis), output_dir)

    if not verify:
        return GenerationRun(result=result, verification_report=None)

    report = verify_models(items=check_items, output_dir=output_dir)
    return GenerationRun(result=result, verification_report=report)


def _check_items(description: RestDescription, api: GeneratedApi) -> list[ModelCheckItem]:
    sources = {
        schema.id: schema.to_source()
        for schema in description.schemas.values()
        if schema.id is not None
    }
    items: list[ModelCheckItem] = []
    for model in api.models:
        name = model.name.simple_name
        if not isinstance(model, ClassDef) or name not in sources:
            continue
        items.append(
            ModelCheckItem(
                api_name=description.selector,
                class_name=name,
                model_package=api.model_package,
                source_schema=sources[name],
            )
        )
    return items


__all__ = [
    "ApiGenerationError",
    "DiscoveryLoadError",
    "GenerationRun",
    "WriteError",
    "generate_api",
    "resolve_input_paths",
    "run_generation",
]
