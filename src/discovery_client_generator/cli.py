"""Command line interface for discovery client generation."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import ConfigError, GeneratorConfig, load_config
from .generator import (
    ApiGenerationError,
    DiscoveryLoadError,
    WriteError,
    resolve_input_paths,
    run_generation,
)
from .verify import format_report


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="discovery-client-generator",
        description="Generate typed Python API clients from discovery documents",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--input", help="Path to a single discovery document")
    parser.add_argument(
        "--input-dir",
        help="Directory holding <name>.<version>.json discovery documents",
    )
    parser.add_argument(
        "--api",
        action="append",
        dest="apis",
        metavar="NAME:VERSION",
        help="API to generate from --input-dir; may be repeated",
    )
    parser.add_argument(
        "--base-package",
        help="Dotted package the generated API packages are placed in",
    )
    parser.add_argument("--output", help="Output directory for generated packages")
    parser.add_argument(
        "--verify",
        action="store_true",
        default=None,
        help="Check generated model JSON schemas against the source schemas",
    )
    parser.add_argument("--verbose", action="store_true", help="Log generation progress")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = _effective_config(args)
        if config.output_dir is None:
            raise ConfigError("An output directory is required (--output or output_dir)")
        run = run_generation(
            input_paths=resolve_input_paths(config),
            output_dir=config.output_dir,
            base_package=config.base_package,
            verify=config.verify,
        )
    except (ApiGenerationError, ConfigError, DiscoveryLoadError, WriteError) as exc:
        parser.error(str(exc))
        return 2

    for warning in run.result.warnings:
        print(f"Warning: {warning}")

    if run.verification_report is not None:
        print(format_report(run.verification_report))
        if run.verification_report.mismatch_count > 0:
            return 1

    return 0


def _effective_config(args: argparse.Namespace) -> GeneratorConfig:
    config = load_config(Path(args.config)) if args.config else GeneratorConfig()
    return config.merged(
        base_package=args.base_package,
        output_dir=Path(args.output) if args.output else None,
        input=Path(args.input) if args.input else None,
        input_dir=Path(args.input_dir) if args.input_dir else None,
        apis=tuple(args.apis) if args.apis else None,
        verify=args.verify,
    )


if __name__ == "__main__":
    raise SystemExit(main())
