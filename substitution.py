"""
Plugin substitution: disable one packaging plugin and hand its job to another.

For every project that declares *both* the source plugin (e.g.
``maven-war-plugin``) and the target plugin (e.g. ``ibis-war-plugin``):

  1. all executions of the source plugin are cleared, so it no longer runs
     (the declaration itself stays in place);
  2. one execution is appended to the target plugin, bound to the
     ``package`` phase, whose configuration is the source plugin's
     top-level ``<configuration>`` (same object, not a copy).

Projects that lack either plugin are left untouched.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import logger as log
from config import MigrationSettings
from errors import DuplicatePluginDeclaration
from pom import Plugin, PluginExecution, PluginIdentity, ProjectModel


@dataclass
class LookupResult:
    """Outcome of :func:`lookup_plugin`: at most one of *plugin* / *error* is set."""
    plugin: Optional[Plugin]                     = None
    error:  Optional[DuplicatePluginDeclaration] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def find_plugin(plugins: Iterable[Plugin], identity: PluginIdentity) -> Optional[Plugin]:
    """
    Return the single declaration in *plugins* matching *identity*, or None.
    Raises :class:`DuplicatePluginDeclaration` if more than one matches.
    """
    result: Optional[Plugin] = None
    for plugin in plugins:
        log.debug(f"Found plugin [{plugin.artifact_id}]")
        if plugin.identity == identity:
            if result is not None:
                raise DuplicatePluginDeclaration(identity.group_id, identity.artifact_id)
            result = plugin
    return result


def lookup_plugin(plugins: Iterable[Plugin], identity: PluginIdentity) -> LookupResult:
    """Like :func:`find_plugin`, but reports a duplicate in the result instead of raising."""
    try:
        return LookupResult(plugin=find_plugin(plugins, identity))
    except DuplicatePluginDeclaration as exc:
        return LookupResult(error=exc)


def migrate_project(project: ProjectModel, settings: MigrationSettings) -> int:
    """Apply the substitution to one project; returns 1 if it was migrated, else 0."""
    target = find_plugin(project.plugins, settings.target)
    if target is None:
        return 0
    source = find_plugin(project.plugins, settings.source)
    if source is None:
        return 0

    source.executions.clear()
    target.executions.append(
        PluginExecution(
            id            = settings.execution_id,
            phase         = settings.phase,
            goals         = [settings.goal],
            configuration = source.configuration,
        )
    )
    log.info(f"[{project.artifact_id}] {settings.source.artifact_id} → {settings.target.artifact_id}")
    return 1


def migrate_projects(
    projects: Iterable[ProjectModel],
    settings: MigrationSettings,
) -> list[ProjectModel]:
    """
    Migrate every project in order, log a one-line summary and return the
    projects that were migrated (the replaced count is its length).

    A :class:`DuplicatePluginDeclaration` propagates immediately; projects
    migrated before the failing one keep their changes.
    """
    migrated = [p for p in projects if migrate_project(p, settings)]
    replaced = len(migrated)

    if replaced > 0:
        log.info(
            f"Replaced ({replaced}) execution(s) of {settings.source.artifact_id} "
            f"with {settings.target.artifact_id}"
        )
    else:
        log.info(f"No executions of {settings.source.artifact_id} were replaced")
    return migrated
