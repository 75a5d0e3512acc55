"""
Exploded-webapp assembly with the warbuild customizations.

``assemble`` runs, for one project:

  before_assembly hooks   add Java sources as a web resource, default excludes
  copy_web_resources      src/main/webapp + web resources → webapp dir
  write_manifest          META-INF/MANIFEST.MF with project information
  after_assembly hooks    enable the web.xml security constraints

Packing the directory into a ``.war`` archive is left to the build tool.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import fs
import logger as log
from config import DEFAULT_PACKAGING_EXCLUDES, WarSettings, WebResource
from pom import ProjectModel

CLASSES_TARGET_PATH = "WEB-INF/classes"
WEB_XML_PATH        = "WEB-INF/web.xml"
MANIFEST_PATH       = "META-INF/MANIFEST.MF"

# Manifest lines are limited to 72 bytes, continuation lines start with a space
_MANIFEST_LINE_BYTES = 72


def add_java_sources(settings: WarSettings, source_directory: Path) -> None:
    """Append *source_directory* as a web resource targeting ``WEB-INF/classes``."""
    for resource in settings.web_resources:
        log.info(f"Copying custom webResource [{resource.directory}] to [{resource.target_path}]")

    settings.web_resources.append(
        WebResource(directory=Path(source_directory), target_path=CLASSES_TARGET_PATH)
    )
    log.info(f"Copying java webResources [{source_directory}] to [{CLASSES_TARGET_PATH}]")


def default_packaging_excludes(settings: WarSettings) -> None:
    """Exclude ``.gitignore`` files unless the build configured its own excludes."""
    if not settings.packaging_excludes:
        settings.packaging_excludes = list(DEFAULT_PACKAGING_EXCLUDES)


def build_manifest(project: ProjectModel, now: Optional[datetime] = None) -> Dict[str, str]:
    """Manifest entries describing *project*, in output order."""
    now = now or datetime.now()
    entries: Dict[str, str] = {"Project": project.name}
    if project.description is not None:
        entries["Description"] = project.description
    entries["Created-Time"]   = now.strftime("%Y-%m-%d %I:%M:%S")
    entries["Build-Version"]  = project.version
    entries["Build-Artifact"] = project.artifact_id
    return entries


def _manifest_lines(key: str, value: str) -> list[str]:
    # a newline would end the header
    value = value.replace("\r", " ").replace("\n", " ")
    text = f"{key}: {value}"
    lines: list[str] = []
    current, size, limit = "", 0, _MANIFEST_LINE_BYTES
    for ch in text:
        width = len(ch.encode("utf-8"))
        if size + width > limit:
            lines.append(current)
            current, size, limit = " ", 1, _MANIFEST_LINE_BYTES
        current += ch
        size += width
    lines.append(current)
    return lines


def write_manifest(webapp_dir: Path, entries: Dict[str, str]) -> Path:
    """Write ``META-INF/MANIFEST.MF`` below *webapp_dir* and return its path."""
    lines = _manifest_lines("Manifest-Version", "1.0")
    for key, value in entries.items():
        lines.extend(_manifest_lines(key, value))

    path = webapp_dir / MANIFEST_PATH
    fs.ensure_dir(path.parent)
    path.write_bytes(("\r\n".join(lines) + "\r\n\r\n").encode("utf-8"))
    log.info(f"Wrote {MANIFEST_PATH} ({len(entries)} entries)")
    return path


def copy_web_resources(project: ProjectModel, webapp_dir: Path, settings: WarSettings) -> int:
    """
    Copy the WAR source directory and every configured web resource into
    *webapp_dir*, honouring the packaging excludes.  Returns the file count.
    """
    fs.ensure_dir(webapp_dir)
    copied = 0
    if project.webapp_directory is not None:
        copied += len(fs.copy_tree(
            project.webapp_directory, webapp_dir, excludes=settings.packaging_excludes,
        ))
    for resource in settings.web_resources:
        dst = webapp_dir / resource.target_path if resource.target_path else webapp_dir
        copied += len(fs.copy_tree(
            Path(resource.directory), dst, excludes=settings.packaging_excludes,
        ))
    return copied


def assemble(project: ProjectModel, webapp_dir: Path, settings: WarSettings, *, verbose: bool = False) -> bool:
    """
    Build the exploded webapp for *project* in *webapp_dir*.
    Returns False if a hook failed; the remaining steps are not run.
    """
    import hooks as hooksmod  # lazy import to avoid circular deps

    log.section(f"Assembling  {project.name}")
    ctx = hooksmod.HookContext(
        project    = project,
        webapp_dir = Path(webapp_dir),
        settings   = settings,
        verbose    = verbose,
    )

    if not hooksmod.run_hooks("before_assembly", hooksmod.BEFORE_ASSEMBLY, ctx):
        return False

    copied = copy_web_resources(project, ctx.webapp_dir, settings)
    log.info(f"Copied {copied} file(s) into {ctx.webapp_dir}")
    write_manifest(ctx.webapp_dir, build_manifest(project))

    if not hooksmod.run_hooks("after_assembly", hooksmod.AFTER_ASSEMBLY, ctx):
        return False

    log.success(f"{project.name}: webapp assembled in {ctx.webapp_dir}")
    return True
