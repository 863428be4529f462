from __future__ import annotations

import importlib.metadata
import subprocess
from pathlib import Path
from typing import Optional


def _run_git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
        return out.decode().strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None


def get_version() -> str:
    """Installed package version, or "unknown" when running from a checkout."""
    try:
        return importlib.metadata.version("rawedit")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_version_string() -> str:
    """Version plus the short git commit when run from a repository."""
    version = get_version()
    commit = _run_git(["rev-parse", "--short=7", "HEAD"], cwd=Path(__file__).resolve().parent)
    if commit:
        return f"{version} ({commit})"
    return version
