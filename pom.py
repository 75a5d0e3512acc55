"""
In-memory build description model backed by ``pom.xml``.

Only the parts of the POM the plugin substitution touches are modelled:
project coordinates, ``<build><plugins>`` and ``<modules>``.  Plugin and
execution ``<configuration>`` blocks are carried around as opaque
``ElementTree`` elements; nothing in warbuild looks inside them.

Saving only touches ``<execution>`` elements that were added to or removed
from a plugin in the model; everything else is written as it was parsed
(comments and text content included, whitespace re-indented).
"""
from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import logger as log
from errors import PomError

# ── Maven XML namespace ────────────────────────────────────────────────────
MVN_NS = "http://maven.apache.org/POM/4.0.0"
ET.register_namespace("",    MVN_NS)
ET.register_namespace("xsi", "http://www.w3.org/2001/XMLSchema-instance")

BUILD_POM_NAME = ".buildconfig-pom.xml"


# ══════════════════════════════════════════════════════════════════════════════
# Model
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PluginIdentity:
    """
    ``groupId:artifactId`` pair of a build plugin.

    ``None`` components are stored as ``""``, so an absent id and an empty
    one are the same identity.
    """
    group_id:    Optional[str] = ""
    artifact_id: Optional[str] = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "group_id",    self.group_id or "")
        object.__setattr__(self, "artifact_id", self.artifact_id or "")

    @classmethod
    def parse(cls, coords: str) -> "PluginIdentity":
        """Parse ``"groupId:artifactId"``."""
        group_id, sep, artifact_id = coords.strip().partition(":")
        if not sep or not artifact_id:
            raise ValueError(f"expected groupId:artifactId, got '{coords}'")
        return cls(group_id, artifact_id)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


@dataclass
class PluginExecution:
    """One ``<execution>`` binding of a plugin."""
    id:            str                   = ""
    phase:         Optional[str]         = None
    goals:         list[str]             = field(default_factory=list)
    configuration: Optional[ET.Element]  = None
    element:       Optional[ET.Element]  = field(default=None, repr=False, compare=False)


@dataclass
class Plugin:
    """One ``<plugin>`` declaration under ``<build><plugins>``."""
    group_id:      Optional[str]
    artifact_id:   Optional[str]
    version:       Optional[str]          = None
    configuration: Optional[ET.Element]   = None
    executions:    list[PluginExecution]  = field(default_factory=list)
    element:       Optional[ET.Element]   = field(default=None, repr=False, compare=False)

    @property
    def identity(self) -> PluginIdentity:
        return PluginIdentity(self.group_id, self.artifact_id)


@dataclass
class ProjectModel:
    """
    One project of a (possibly multi-module) build.

    path             – absolute path of the pom.xml it was loaded from
    plugins          – ordered, mutable ``<build><plugins>`` declarations
    source_directory – Java sources (``build.sourceDirectory``)
    webapp_directory – WAR sources (``src/main/webapp``)
    modules          – ``<module>`` entries, relative to the project dir
    """
    path:             Path
    name:             str
    group_id:         str
    artifact_id:      str
    version:          str
    description:      Optional[str]  = None
    packaging:        str            = "jar"
    source_directory: Optional[Path] = None
    webapp_directory: Optional[Path] = None
    plugins:          list[Plugin]   = field(default_factory=list)
    modules:          list[str]      = field(default_factory=list)
    tree:             Optional[ET.ElementTree] = field(default=None, repr=False, compare=False)

    @property
    def project_dir(self) -> Path:
        return self.path.parent

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


# ══════════════════════════════════════════════════════════════════════════════
# XML helpers
# ══════════════════════════════════════════════════════════════════════════════

def _namespace(root: ET.Element) -> str:
    if root.tag.startswith("{"):
        return root.tag[1:].partition("}")[0]
    return ""


def _tag(ns: str, local: str) -> str:
    return f"{{{ns}}}{local}" if ns else local


def _text(parent: Optional[ET.Element], ns: str, local: str) -> Optional[str]:
    """Stripped text of ``<local>`` under *parent*, or None if absent."""
    if parent is None:
        return None
    el = parent.find(_tag(ns, local))
    if el is None:
        return None
    return (el.text or "").strip()


def _serialize(root: ET.Element) -> str:
    """Return indented XML string with a single declaration line."""
    # only whitespace-only text is re-indented, leaf text stays as parsed
    ET.indent(root, space="    ")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode") + "\n"


def _read_execution(el: ET.Element, ns: str) -> PluginExecution:
    goals_el = el.find(_tag(ns, "goals"))
    goals: list[str] = []
    if goals_el is not None:
        goals = [
            (g.text or "").strip()
            for g in goals_el.findall(_tag(ns, "goal"))
            if (g.text or "").strip()
        ]
    return PluginExecution(
        id            = _text(el, ns, "id") or "default",
        phase         = _text(el, ns, "phase"),
        goals         = goals,
        configuration = el.find(_tag(ns, "configuration")),
        element       = el,
    )


def _read_plugin(el: ET.Element, ns: str) -> Plugin:
    executions: list[PluginExecution] = []
    execs_el = el.find(_tag(ns, "executions"))
    if execs_el is not None:
        executions = [_read_execution(x, ns) for x in execs_el.findall(_tag(ns, "execution"))]
    return Plugin(
        group_id      = _text(el, ns, "groupId"),
        artifact_id   = _text(el, ns, "artifactId"),
        version       = _text(el, ns, "version"),
        configuration = el.find(_tag(ns, "configuration")),
        executions    = executions,
        element       = el,
    )


def _write_execution(parent: ET.Element, execution: PluginExecution, ns: str) -> ET.Element:
    el = ET.SubElement(parent, _tag(ns, "execution"))
    ET.SubElement(el, _tag(ns, "id")).text = execution.id
    if execution.phase:
        ET.SubElement(el, _tag(ns, "phase")).text = execution.phase
    if execution.goals:
        goals_el = ET.SubElement(el, _tag(ns, "goals"))
        for goal in execution.goals:
            ET.SubElement(goals_el, _tag(ns, "goal")).text = goal
    if execution.configuration is not None:
        # the payload may be shared with another plugin; never re-parent it
        conf = copy.deepcopy(execution.configuration)
        conf.tag = _tag(ns, "configuration")
        el.append(conf)
    return el


def _sync_plugin_element(plugins_el: ET.Element, plugin: Plugin, ns: str) -> None:
    if plugin.element is None:
        plugin.element = ET.SubElement(plugins_el, _tag(ns, "plugin"))
        for local, value in (
            ("groupId", plugin.group_id),
            ("artifactId", plugin.artifact_id),
            ("version", plugin.version),
        ):
            if value:
                ET.SubElement(plugin.element, _tag(ns, local)).text = value

    execs_el = plugin.element.find(_tag(ns, "executions"))
    existing = execs_el.findall(_tag(ns, "execution")) if execs_el is not None else []
    kept  = {id(x.element) for x in plugin.executions if x.element is not None}
    added = [x for x in plugin.executions if x.element is None]
    stale = [el for el in existing if id(el) not in kept]
    if not stale and not added:
        return

    for el in stale:
        execs_el.remove(el)
    if added:
        if execs_el is None:
            execs_el = ET.SubElement(plugin.element, _tag(ns, "executions"))
        for execution in added:
            execution.element = _write_execution(execs_el, execution, ns)
    elif execs_el.find(_tag(ns, "execution")) is None:
        plugin.element.remove(execs_el)


# ══════════════════════════════════════════════════════════════════════════════
# Public API
# ══════════════════════════════════════════════════════════════════════════════

def load_pom(path: Path) -> ProjectModel:
    """
    Parse *path* into a :class:`ProjectModel`.
    Raises :class:`PomError` if the file is missing or malformed.
    """
    path = Path(path).resolve()
    if not path.exists():
        raise PomError(f"{path} not found")
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    try:
        tree = ET.parse(str(path), parser=parser)
    except ET.ParseError as exc:
        raise PomError(f"Malformed {path}: {exc}") from exc

    root = tree.getroot()
    ns = _namespace(root)
    parent_el = root.find(_tag(ns, "parent"))
    project_dir = path.parent

    artifact_id = _text(root, ns, "artifactId")
    if not artifact_id:
        raise PomError(f"{path}: missing required field 'artifactId'")
    group_id = _text(root, ns, "groupId") or _text(parent_el, ns, "groupId") or ""
    version  = _text(root, ns, "version") or _text(parent_el, ns, "version") or ""

    source_directory = project_dir / "src" / "main" / "java"
    plugins: list[Plugin] = []
    build_el = root.find(_tag(ns, "build"))
    if build_el is not None:
        src = _text(build_el, ns, "sourceDirectory")
        if src:
            source_directory = project_dir / src
        plugins_el = build_el.find(_tag(ns, "plugins"))
        if plugins_el is not None:
            plugins = [_read_plugin(el, ns) for el in plugins_el.findall(_tag(ns, "plugin"))]

    modules: list[str] = []
    modules_el = root.find(_tag(ns, "modules"))
    if modules_el is not None:
        modules = [
            (m.text or "").strip()
            for m in modules_el.findall(_tag(ns, "module"))
            if (m.text or "").strip()
        ]

    return ProjectModel(
        path             = path,
        name             = _text(root, ns, "name") or artifact_id,
        group_id         = group_id,
        artifact_id      = artifact_id,
        version          = version,
        description      = _text(root, ns, "description") or None,
        packaging        = _text(root, ns, "packaging") or "jar",
        source_directory = source_directory,
        webapp_directory = project_dir / "src" / "main" / "webapp",
        plugins          = plugins,
        modules          = modules,
        tree             = tree,
    )


def load_reactor(root_pom: Path) -> list[ProjectModel]:
    """
    Load *root_pom* and every ``<module>`` below it, depth-first in
    declaration order (parent before its modules).
    """
    projects: list[ProjectModel] = []
    seen: set[Path] = set()

    def _visit(pom_path: Path) -> None:
        pom_path = pom_path.resolve()
        if pom_path in seen:
            return
        seen.add(pom_path)
        project = load_pom(pom_path)
        projects.append(project)
        for module in project.modules:
            target = project.project_dir / module
            if target.suffix != ".xml":
                target = target / "pom.xml"
            _visit(target)

    _visit(Path(root_pom))
    return projects


def save_pom(project: ProjectModel, dest: Optional[Path] = None) -> Path:
    """
    Write *project* back to XML.  Executions added to a plugin in the model
    are appended, removed ones are dropped; untouched plugins and
    executions are written as parsed.

    Returns the written path (*dest* or ``.buildconfig-pom.xml`` next to the
    source pom).
    """
    if project.tree is None:
        raise PomError(f"{project.artifact_id}: model was not loaded from a pom.xml")
    dest = Path(dest) if dest is not None else project.project_dir / BUILD_POM_NAME

    root = project.tree.getroot()
    ns = _namespace(root)
    build_el = root.find(_tag(ns, "build"))
    if build_el is None and project.plugins:
        build_el = ET.SubElement(root, _tag(ns, "build"))
    if build_el is not None:
        plugins_el = build_el.find(_tag(ns, "plugins"))
        if plugins_el is None and project.plugins:
            plugins_el = ET.SubElement(build_el, _tag(ns, "plugins"))
        if plugins_el is not None:
            for plugin in project.plugins:
                _sync_plugin_element(plugins_el, plugin, ns)

    try:
        dest.write_text(_serialize(root), encoding="utf-8")
    except OSError as exc:
        raise PomError(f"could not write {dest}: {exc}") from exc
    log.debug(f"wrote {dest}")
    return dest
