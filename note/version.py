"""Version string for `note --version`.

The release comes from the installed distribution's metadata. Build
details (commit and date) are looked up, in order, in a live git
checkout, in the `_build_info` module the hatch build hook writes, and in
PEP 610 direct_url.json for VCS installs.
"""

import importlib.metadata
import json
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional

DISTRIBUTION = "note-editor"


class BuildInfo(NamedTuple):
    commit: Optional[str]
    date: Optional[str]
    dirty: bool


def _run_git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None
    return out.decode().strip() or None


def _from_git_repo() -> Optional[BuildInfo]:
    here = Path(__file__).resolve().parent
    root = _run_git(["rev-parse", "--show-toplevel"], cwd=here)
    if not root:
        return None
    commit = _run_git(["rev-parse", "HEAD"], cwd=Path(root))
    date = _run_git(["show", "-s", "--format=%cI", "HEAD"], cwd=Path(root))
    status = _run_git(["status", "--porcelain"], cwd=Path(root))
    return BuildInfo(commit=commit, date=date, dirty=bool(status))


def _from_embedded_file() -> Optional[BuildInfo]:
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    commit = getattr(_build_info, "COMMIT", None)
    date = getattr(_build_info, "DATE", None)
    if commit or date:
        return BuildInfo(commit=commit, date=date, dirty=False)
    return None


def _from_direct_url() -> Optional[BuildInfo]:
    try:
        dist = importlib.metadata.distribution(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return None
    text = dist.read_text("direct_url.json")
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    commit = (data.get("vcs_info") or {}).get("commit_id")
    if commit:
        return BuildInfo(commit=commit, date=None, dirty=False)
    return None


def get_build_info() -> BuildInfo:
    for getter in (_from_git_repo, _from_embedded_file, _from_direct_url):
        info = getter()
        if info and (info.commit or info.date):
            return info
    return BuildInfo(commit=None, date=None, dirty=False)


def get_release() -> str:
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_version_string() -> str:
    info = get_build_info()
    commit = info.commit[:7] if info.commit else "unknown"
    dirty_suffix = "-dirty" if info.dirty else ""
    date = info.date or "unknown"
    return f"note {get_release()} ({commit}{dirty_suffix} {date})"
