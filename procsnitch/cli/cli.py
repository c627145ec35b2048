#!/usr/bin/env python3
"""
Command-line options for procsnitch.
"""
import argparse
from pathlib import Path
from typing import List, Optional

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config_yaml"


def build_snitch_parser(description: Optional[str] = None) -> argparse.ArgumentParser:
    """
    Create the ArgumentParser for the procsnitch command.

    Args:
        description: Optional parser description shown in CLI help.

    Returns:
        argparse.ArgumentParser: parser with the config, env and output options.
    """
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=DEFAULT_CONFIG_DIR,
        help="Directory holding config.yaml (default: the bundled config_yaml).",
    )
    parser.add_argument(
        "--env",
        type=str,
        default=None,
        help=(
            "Environment name for configuration override (e.g., 'dev', 'prod'). "
            "Loads config_<env>.yaml in addition to the base config.yaml."
        ),
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Override the configured output directory.",
    )
    parser.add_argument(
        "--no-plot",
        action="store_true",
        help="Skip chart rendering; only write CSV and JSON.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every sample.",
    )
    return parser


def parse_snitch_args(argv: Optional[List[str]] = None, description: Optional[str] = None) -> argparse.Namespace:
    parser = build_snitch_parser(description=description)
    return parser.parse_args(argv)
