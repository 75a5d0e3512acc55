"""
Central configuration for warbuild.

Every default can be overridden with a ``WARBUILD_*`` environment variable;
CLI flags override the environment.  Nothing here is consulted implicitly by
the core: callers build a :class:`MigrationSettings` / :class:`WarSettings`
and pass it in.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pom import PluginIdentity


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ── Plugin substitution ───────────────────────────────────────────────────────
# The plugin whose executions are disabled …
SOURCE_PLUGIN = os.environ.get(
    "WARBUILD_SOURCE_PLUGIN", "org.apache.maven.plugins:maven-war-plugin"
)
# … and the plugin that takes them over.
TARGET_PLUGIN = os.environ.get(
    "WARBUILD_TARGET_PLUGIN", "org.ibissource:ibis-war-plugin"
)

INJECTED_EXECUTION_ID = os.environ.get("WARBUILD_EXECUTION_ID", "injected-ibis-war-plugin")
INJECTED_GOAL         = os.environ.get("WARBUILD_GOAL", "war")
INJECTED_PHASE        = os.environ.get("WARBUILD_PHASE", "package")

# ── Webapp assembly ───────────────────────────────────────────────────────────
# Uncomment the security-constraint block in WEB-INF/web.xml after assembly.
ENABLE_SECURITY_CONSTRAINTS = _env_flag("WARBUILD_ENABLE_SECURITY_CONSTRAINTS", True)

# Missing WEB-INF/web.xml: True → fatal, False → warn and skip.
FAIL_ON_MISSING_WEB_XML = _env_flag("WARBUILD_FAIL_ON_MISSING_WEB_XML", False)

# Ship the raw Java sources under WEB-INF/classes (debugging aid).
PACKAGE_JAVA_CLASSES = _env_flag("WARBUILD_PACKAGE_JAVA_CLASSES", True)

DEFAULT_PACKAGING_EXCLUDES = [".gitignore"]


@dataclass(frozen=True)
class MigrationSettings:
    """Which plugin is replaced by which, and what the injected execution looks like."""
    source:       PluginIdentity
    target:       PluginIdentity
    execution_id: str = INJECTED_EXECUTION_ID
    goal:         str = INJECTED_GOAL
    phase:        str = INJECTED_PHASE


@dataclass
class WebResource:
    """A directory copied into the exploded webapp at *target_path*."""
    directory:   Path
    target_path: str = ""


@dataclass
class WarSettings:
    """
    Settings for one webapp assembly.  Mutated by the before-assembly hook
    (web resources, packaging excludes), so build a fresh one per project.
    """
    enable_security_constraints: bool              = ENABLE_SECURITY_CONSTRAINTS
    fail_on_missing_web_xml:     bool              = FAIL_ON_MISSING_WEB_XML
    package_java_classes:        bool              = PACKAGE_JAVA_CLASSES
    packaging_excludes:          list[str]         = field(default_factory=list)
    web_resources:               list[WebResource] = field(default_factory=list)


def migration_settings(
    source: Optional[str] = None,
    target: Optional[str] = None,
) -> MigrationSettings:
    """Build :class:`MigrationSettings` from coordinates, falling back to the defaults above."""
    return MigrationSettings(
        source = PluginIdentity.parse(source or SOURCE_PLUGIN),
        target = PluginIdentity.parse(target or TARGET_PLUGIN),
    )
