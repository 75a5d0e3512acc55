"""
Lifecycle hooks wiring the warbuild core into a build.

────────────────────────────────────────────────────────────────────────────
Phases
────────────────────────────────────────────────────────────────────────────
``after_projects_read``
    Runs once per build, after every project model is loaded and before
    anything is packaged.  Replaces the stock WAR plugin's executions with
    an execution of the replacement plugin (see :mod:`substitution`).

``before_assembly`` / ``after_assembly``
    Run around the exploded-webapp assembly of one project.  A **Hook** is
    any callable ``(HookContext) -> HookResult``; the standard tables are
    :data:`BEFORE_ASSEMBLY` and :data:`AFTER_ASSEMBLY`.

Hooks report failures through :class:`HookResult`.  Errors raised by the
core (:class:`errors.WarBuildError`) are converted to failed results by
:func:`run_hooks`; anything else propagates.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

import logger as log
import war
import webxml
from config import MigrationSettings, WarSettings
from errors import DuplicatePluginDeclaration, WarBuildError
from pom import ProjectModel
from substitution import migrate_projects


# ══════════════════════════════════════════════════════════════════════════════
# Public data types
# ══════════════════════════════════════════════════════════════════════════════

@dataclass
class HookContext:
    """
    Runtime context passed to every assembly hook.

    project    – the project being packaged
    webapp_dir – exploded webapp directory
    settings   – assembly settings (mutable, one per project)
    verbose    – stream debug output
    extra      – free-form dict for hook-specific parameters
    """
    project:    ProjectModel
    webapp_dir: Path
    settings:   WarSettings
    verbose:    bool = False
    extra:      dict = field(default_factory=dict)


@dataclass
class HookResult:
    """
    Return value from a hook callable.

    success  – False → abort the assembly for this project
    message  – human-readable status (logged automatically)
    migrated – projects changed by ``after_projects_read``
    """
    success:  bool = True
    message:  str  = ""
    migrated: list = field(default_factory=list)

    @property
    def replaced(self) -> int:
        return len(self.migrated)


Hook = Callable[[HookContext], HookResult]


# ══════════════════════════════════════════════════════════════════════════════
# Lifecycle participant
# ══════════════════════════════════════════════════════════════════════════════

def after_projects_read(
    projects: Iterable[ProjectModel],
    settings: MigrationSettings,
) -> HookResult:
    """
    Swap ``settings.source`` for ``settings.target`` in every project.

    A duplicate plugin declaration fails the whole run; projects migrated
    before the failing one are not rolled back.
    """
    log.banner(
        "WAR plugin substitution",
        f"{settings.source}  →  {settings.target}",
    )
    try:
        migrated = migrate_projects(projects, settings)
    except DuplicatePluginDeclaration as exc:
        return HookResult(success=False, message=str(exc))
    return HookResult(
        success  = True,
        migrated = migrated,
        message  = f"{len(migrated)} project(s) migrated",
    )


# ══════════════════════════════════════════════════════════════════════════════
# Assembly hooks
# ══════════════════════════════════════════════════════════════════════════════

def war_before_assembly(ctx: HookContext) -> HookResult:
    """Add the Java sources as a web resource and default the packaging excludes."""
    settings = ctx.settings
    if settings.package_java_classes:
        source_directory = ctx.project.source_directory or (
            ctx.project.project_dir / "src" / "main" / "java"
        )
        war.add_java_sources(settings, source_directory)
    war.default_packaging_excludes(settings)
    return HookResult(
        success=True,
        message=f"packaging excludes: {', '.join(settings.packaging_excludes)}",
    )


def war_after_assembly(ctx: HookContext) -> HookResult:
    """Enable the security constraints in the assembled ``WEB-INF/web.xml``."""
    if not ctx.settings.enable_security_constraints:
        log.warn("Skipping security constraints in web.xml")
        return HookResult(success=True)

    log.info("Enabling security constraints")
    status = webxml.patch_file(
        ctx.webapp_dir / war.WEB_XML_PATH,
        fail_if_missing=ctx.settings.fail_on_missing_web_xml,
    )
    return HookResult(success=True, message=f"web.xml patch {status}")


BEFORE_ASSEMBLY: list[Hook] = [war_before_assembly]
AFTER_ASSEMBLY:  list[Hook] = [war_after_assembly]


# ══════════════════════════════════════════════════════════════════════════════
# Hook runner
# ══════════════════════════════════════════════════════════════════════════════

def run_hooks(phase: str, hooks: list[Hook], ctx: HookContext) -> bool:
    """
    Execute all hooks for *phase* in order; stop at the first failure.
    Returns True if every hook succeeded.
    """
    name = ctx.project.artifact_id
    for hook in hooks:
        hook_name = getattr(hook, "__name__", repr(hook))
        log.debug(f"[{name}] {phase} → {hook_name}")
        try:
            result: HookResult = hook(ctx)
        except WarBuildError as exc:
            log.error(f"[{name}] hook '{hook_name}' failed: {exc}")
            return False

        if result.message:
            (log.info if result.success else log.error)(f"  → {result.message}")

        if not result.success:
            log.error(f"[{name}] {phase} hook '{hook_name}' failed – aborting.")
            return False
    return True
