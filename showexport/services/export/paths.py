"""
Output path helpers: collision-free file names and export folders.
"""
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from showexport.core.config import settings

PathLike = Union[str, Path]


def unique_path_candidate(base_path: PathLike, extension: str, num: int) -> Path:
    """Candidate number ``num``; 0 is the bare name."""
    suffix = f"_{num}" if num else ""
    return Path(f"{base_path}{suffix}{extension}")


def allocate_unique_path(base_path: PathLike, extension: str) -> Path:
    """
    Find a path that does not exist yet.

    Tries ``base + extension``, then ``base_1 + extension``, ``base_2``...
    until a free one is found. Only checks for existence, never creates.

    Args:
        base_path: Desired path without extension
        extension: Extension including the dot (``.txt``)

    Returns:
        First free candidate
    """
    num = 0
    candidate = unique_path_candidate(base_path, extension, num)
    while candidate.exists():
        num += 1
        candidate = unique_path_candidate(base_path, extension, num)
    return candidate


def time_point_string(moment: Optional[datetime] = None) -> str:
    """Timestamp used for batch folders and usage dumps."""
    return (moment or datetime.now()).strftime(settings.TIMEPOINT_FORMAT)


def ensure_folder(path: PathLike) -> Path:
    folder = Path(path)
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def data_folder(data_path: PathLike, name: str) -> Path:
    """Named subfolder of the data folder, created on demand."""
    return ensure_folder(Path(data_path) / name)
