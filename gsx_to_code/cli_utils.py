"""
CLI utilities for locating sources and loading configuration.
"""

import json
from pathlib import Path

import click

from .pipeline import AnalyzerConfig

GSX_SUFFIX = ".gsx"


def collect_gsx_files(paths: tuple[str, ...] | list[str]) -> list[Path]:
    """
    Expand command line paths into .gsx files.

    Args:
        paths: Files and directories; directories are walked recursively

    Returns:
        Sorted, de-duplicated list of .gsx files
    """
    files: set[Path] = set()
    for p in paths:
        path = Path(p)
        if path.is_dir():
            files.update(f for f in path.rglob(f"*{GSX_SUFFIX}") if f.is_file())
        elif path.suffix == GSX_SUFFIX:
            files.add(path)
        else:
            raise click.BadParameter(f"{path} is not a {GSX_SUFFIX} file or directory", param_hint="PATHS")
    return sorted(files)


def load_config(path: str | None) -> AnalyzerConfig:
    """Load an AnalyzerConfig from a JSON file, or return the defaults."""
    if path is None:
        return AnalyzerConfig()
    with open(path) as f:
        return AnalyzerConfig.from_dict(json.load(f))
