"""
Enable the security-constraint block of a generated ``web.xml``.

The webapp template ships that block commented out between two fixed
markers.  Enabling it is a plain text substitution, not an XML edit: every
occurrence of each marker is rewritten, wherever it appears.
"""
from pathlib import Path

import logger as log
from errors import PatchIOFailure, PatchTargetMissing

MARKERS = (
    ("<!-- security-constraint>", "<security-constraint>"),
    ("</security-role -->",       "</security-role>"),
)

PATCH_APPLIED = "applied"
PATCH_SKIPPED = "skipped"


def patch(content: str) -> str:
    """Replace both disabled markers with their active form."""
    for disabled, active in MARKERS:
        content = content.replace(disabled, active)
    return content


def patch_file(path: Path, *, fail_if_missing: bool = False) -> str:
    """
    Patch *path* in place.

    Returns ``PATCH_APPLIED`` or, when the file is missing and
    *fail_if_missing* is False, ``PATCH_SKIPPED``.
    Raises :class:`PatchTargetMissing` (missing file, *fail_if_missing*) or
    :class:`PatchIOFailure` (read / decode / write error).
    """
    path = Path(path)
    if not path.exists():
        if fail_if_missing:
            raise PatchTargetMissing(path)
        log.warn(f"no {path.name} found at {path}, skipping...")
        return PATCH_SKIPPED

    # newline="" keeps the original line endings untouched
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            content = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise PatchIOFailure(path, exc) from exc

    try:
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(patch(content))
    except OSError as exc:
        raise PatchIOFailure(path, exc) from exc

    log.success(f"security constraints enabled in {path.name}")
    return PATCH_APPLIED
