"""
File-system helpers: create the webapp layout and copy resource trees into it.
"""
import fnmatch
import shutil
from pathlib import Path
from typing import Iterable, List

import logger as log


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
    log.debug(f"Directory ready: {path}")


def is_excluded(rel_path: str, excludes: Iterable[str]) -> bool:
    """
    True if *rel_path* (POSIX, relative to the copied root) matches one of
    the *excludes* globs, either as a whole path or by file name.
    """
    name = rel_path.rsplit("/", 1)[-1]
    for pattern in excludes:
        pattern = pattern.strip().lstrip("/")
        if not pattern:
            continue
        if fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch(name, pattern):
            return True
        # "**/" prefix also matches at the top level
        if pattern.startswith("**/") and fnmatch.fnmatch(rel_path, pattern[3:]):
            return True
    return False


def copy_tree(src: Path, dst: Path, *, excludes: Iterable[str] = ()) -> List[Path]:
    """
    Copy every file below *src* into *dst*, preserving the relative layout and
    overwriting existing files.  Files matching *excludes* are skipped.

    Returns the list of written destination paths; a missing *src* copies
    nothing.
    """
    excludes = list(excludes)
    written: List[Path] = []
    if not src.is_dir():
        log.warn(f"Resource directory not found: {src}")
        return written

    for path in sorted(src.rglob("*")):
        if not path.is_file():
            continue
        rel = path.relative_to(src).as_posix()
        if is_excluded(rel, excludes):
            log.debug(f"excluded {rel}")
            continue
        target = dst / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, target)
        written.append(target)
    return written
