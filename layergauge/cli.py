# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
LayerGauge Command Line Interface

Estimate the device memory of a network given as a JSON file holding
already structured layer declarations, either a list of layer records or
an object ``{"name": ..., "inputs": {blob: shape}, "layers": [...]}``.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the LayerGauge CLI."""
    parser = argparse.ArgumentParser(
        prog="layergauge",
        description="LayerGauge - static network memory analyzer",
    )

    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        help="Show version information",
    )

    parser.add_argument(
        "--info",
        action="store_true",
        help="Show supported layer types",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Build the network and report its memory requirements",
    )
    analyze_parser.add_argument("model", help="JSON file with layer declarations")
    analyze_parser.add_argument(
        "--input",
        action="append",
        default=[],
        metavar="NAME:D0,D1,...",
        help="External input blob and its shape (repeatable)",
    )
    analyze_parser.add_argument(
        "--phase",
        choices=["train", "test"],
        default=None,
        help="Build phase (default: test)",
    )
    analyze_parser.add_argument(
        "--accelerated",
        action="store_true",
        default=None,
        help="Assume an accelerated convolution library is available",
    )
    analyze_parser.add_argument(
        "--budget-mb",
        type=float,
        default=None,
        help="Fail if the network needs more device memory (MiB)",
    )
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    analyze_parser.add_argument(
        "--verbose",
        type=int,
        default=None,
        help="Log verbosity (0=silent ... 4=debug)",
    )

    args = parser.parse_args(argv)

    if args.version:
        from layergauge import __version__

        print(f"LayerGauge v{__version__}")
        return 0

    if args.info:
        _show_info()
        return 0

    if args.command == "analyze":
        return _run_analyze(args)

    # Default: show help
    parser.print_help()
    return 0


def parse_input_spec(spec: str) -> tuple[str, list[int]]:
    """Parse ``name:d0,d1,...`` into a blob name and shape."""
    from layergauge.errors import ConfigurationError

    name, sep, dims = spec.rpartition(":")
    if not sep or not name:
        raise ConfigurationError(
            "input must look like NAME:D0,D1,...", config_key="input", config_value=spec
        )
    try:
        shape = [int(d) for d in dims.split(",") if d.strip()]
    except ValueError:
        raise ConfigurationError(
            "input shape must be integers", config_key="input", config_value=spec
        )
    return name, shape


def load_model(path: Path) -> dict:
    """Load a model description into ``{"name", "inputs", "layers", ...}``."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        data = {"layers": data}
    if not isinstance(data, dict):
        raise ValueError("model must be a list of layers or an object")
    data.setdefault("name", path.stem)
    data.setdefault("inputs", {})
    data.setdefault("layers", [])
    return data


def _run_analyze(args) -> int:
    """Run a memory analysis."""
    from layergauge.api import analyze
    from layergauge.config import AnalyzerConfig
    from layergauge.errors import LayerGaugeError
    from layergauge.observability import set_verbosity

    if args.verbose is not None:
        set_verbosity(args.verbose)

    try:
        model = load_model(Path(args.model))
    except (OSError, ValueError) as e:
        print(f"Error: cannot read {args.model}: {e}", file=sys.stderr)
        return 1

    try:
        inputs = dict(model["inputs"])
        for spec in args.input:
            blob, shape = parse_input_spec(spec)
            inputs[blob] = shape

        config = AnalyzerConfig.from_env(
            phase=args.phase,
            accelerated=args.accelerated,
            gpu_memory_mb=args.budget_mb,
            element_size=model.get("element_size"),
        )
        report = analyze(
            model["layers"],
            config=config,
            input_names=list(inputs) or None,
            input_shapes=list(inputs.values()) or None,
            name=model["name"],
        )
    except LayerGaugeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(report.format_breakdown())
    return 0


def _show_info():
    """Show supported layer types."""
    import platform

    from layergauge import __version__
    from layergauge.layers import LayerFactory

    print("=" * 50)
    print("LayerGauge Information")
    print("=" * 50)
    print(f"LayerGauge Version: {__version__}")
    print(f"Python Version: {platform.python_version()}")
    print("Layer types: " + ", ".join(LayerFactory.supported_types()))
    print("=" * 50)


if __name__ == "__main__":
    sys.exit(main())
