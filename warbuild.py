#!/usr/bin/env python3
"""
warbuild CLI
============

Usage examples
--------------
  warbuild migrate pom.xml                         # write .buildconfig-pom.xml for migrated projects
  warbuild migrate pom.xml --in-place              # rewrite pom.xml files directly
  warbuild migrate pom.xml --source org.apache.maven.plugins:maven-war-plugin \\
                           --target org.example:custom-war-plugin
  warbuild patch-web-xml target/app/WEB-INF/web.xml
  warbuild patch-web-xml web.xml --fail-on-missing
  warbuild assemble pom.xml target/app             # exploded webapp + manifest + web.xml patch
  warbuild assemble pom.xml target/app --no-java-classes --exclude "**/*.bak"
  warbuild manifest pom.xml                        # print the manifest entries
  warbuild info                                    # show resolved configuration
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import config as cfg
import hooks as hooksmod
import logger as log
import pom
import war
import webxml
from errors import PomError, WarBuildError


# ─────────────────────────────────────────────────────────────────────────────
# Sub-command implementations
# ─────────────────────────────────────────────────────────────────────────────

def cmd_migrate(args: argparse.Namespace) -> int:
    """Load the reactor, swap the WAR plugins and write the migrated poms."""
    log.set_verbose(args.verbose)
    try:
        settings = cfg.migration_settings(args.source, args.target)
    except ValueError as exc:
        log.error(str(exc))
        return 2

    try:
        projects = pom.load_reactor(Path(args.pom))
    except PomError as exc:
        log.error(str(exc))
        return 1

    result = hooksmod.after_projects_read(projects, settings)
    if not result.success:
        log.error(result.message)
        return 1

    for project in result.migrated:
        dest = project.path if args.in_place else None
        try:
            written = pom.save_pom(project, dest)
        except PomError as exc:
            log.error(str(exc))
            return 1
        log.success(f"[{project.artifact_id}] pom written → {written}")

    log.info(result.message)
    return 0


def cmd_patch_web_xml(args: argparse.Namespace) -> int:
    """Enable the security constraints in a web.xml."""
    try:
        status = webxml.patch_file(Path(args.path), fail_if_missing=args.fail_on_missing)
    except WarBuildError as exc:
        log.error(str(exc))
        return 1
    log.info(f"web.xml patch {status}")
    return 0


def _war_settings(args: argparse.Namespace) -> cfg.WarSettings:
    settings = cfg.WarSettings()
    if args.no_security_constraints:
        settings.enable_security_constraints = False
    if args.fail_on_missing_web_xml:
        settings.fail_on_missing_web_xml = True
    if args.no_java_classes:
        settings.package_java_classes = False
    settings.packaging_excludes = list(args.exclude or [])
    return settings


def cmd_assemble(args: argparse.Namespace) -> int:
    """Assemble the exploded webapp of one project."""
    log.set_verbose(args.verbose)
    try:
        project = pom.load_pom(Path(args.pom))
    except PomError as exc:
        log.error(str(exc))
        return 1

    ok = war.assemble(project, Path(args.webapp_dir), _war_settings(args), verbose=args.verbose)
    return 0 if ok else 1


def cmd_manifest(args: argparse.Namespace) -> int:
    """Print the manifest entries that ``assemble`` would write."""
    try:
        project = pom.load_pom(Path(args.pom))
    except PomError as exc:
        log.error(str(exc))
        return 1
    log.banner(f"Manifest – {project.name}")
    for key, value in war.build_manifest(project).items():
        print(f"{key}: {value}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Print the resolved configuration."""
    log.banner("warbuild Configuration")
    rows = {
        "Source plugin":          cfg.SOURCE_PLUGIN,
        "Target plugin":          cfg.TARGET_PLUGIN,
        "Injected execution":     cfg.INJECTED_EXECUTION_ID,
        "Injected goal / phase":  f"{cfg.INJECTED_GOAL} / {cfg.INJECTED_PHASE}",
        "Security constraints":   cfg.ENABLE_SECURITY_CONSTRAINTS,
        "Fail on missing web.xml": cfg.FAIL_ON_MISSING_WEB_XML,
        "Package java classes":   cfg.PACKAGE_JAVA_CLASSES,
    }
    for label, value in rows.items():
        log.info(f"   {label:<24} {value}")
    return 0


# ─────────────────────────────────────────────────────────────────────────────
# CLI parser
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="warbuild",
        description="WAR plugin substitution and webapp assembly helpers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version="warbuild 1.0.0")

    sub = parser.add_subparsers(dest="command", metavar="<command>")
    sub.required = True

    # ── migrate ───────────────────────────────────────────────────────────────
    p_mig = sub.add_parser(
        "migrate",
        help="Replace the stock WAR plugin's executions in every project",
        description=(
            "Load POM and all of its modules, clear the executions of the\n"
            "source plugin and inject one 'package' execution into the target\n"
            "plugin of every project that declares both."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_mig.add_argument("pom", metavar="POM")
    p_mig.add_argument("--in-place", action="store_true", dest="in_place",
        help=f"Overwrite pom.xml instead of writing {pom.BUILD_POM_NAME}")
    p_mig.add_argument("--source", metavar="G:A", default=None,
        help=f"Plugin to disable (default: {cfg.SOURCE_PLUGIN})")
    p_mig.add_argument("--target", metavar="G:A", default=None,
        help=f"Plugin to inject (default: {cfg.TARGET_PLUGIN})")
    p_mig.add_argument("--verbose", "-v", action="store_true")
    p_mig.set_defaults(func=cmd_migrate)

    # ── patch-web-xml ─────────────────────────────────────────────────────────
    p_patch = sub.add_parser("patch-web-xml",
        help="Uncomment the security-constraint block of a web.xml")
    p_patch.add_argument("path", metavar="PATH")
    p_patch.add_argument("--fail-on-missing", action="store_true", dest="fail_on_missing",
        help="Exit non-zero when PATH does not exist (default: warn and skip)")
    p_patch.set_defaults(func=cmd_patch_web_xml)

    # ── assemble ──────────────────────────────────────────────────────────────
    p_asm = sub.add_parser("assemble",
        help="Build the exploded webapp directory of a project")
    p_asm.add_argument("pom", metavar="POM")
    p_asm.add_argument("webapp_dir", metavar="WEBAPP_DIR")
    p_asm.add_argument("--no-security-constraints", action="store_true",
        default=not cfg.ENABLE_SECURITY_CONSTRAINTS,
        help="Leave the web.xml security constraints commented out")
    p_asm.add_argument("--fail-on-missing-web-xml", action="store_true",
        default=cfg.FAIL_ON_MISSING_WEB_XML,
        help="Fail instead of warning when WEB-INF/web.xml is missing")
    p_asm.add_argument("--no-java-classes", action="store_true",
        default=not cfg.PACKAGE_JAVA_CLASSES,
        help="Do not copy the Java sources to WEB-INF/classes")
    p_asm.add_argument("--exclude", metavar="GLOB", action="append",
        help="Packaging exclude glob (repeatable, default: .gitignore)")
    p_asm.add_argument("--verbose", "-v", action="store_true")
    p_asm.set_defaults(func=cmd_assemble)

    # ── manifest ──────────────────────────────────────────────────────────────
    p_man = sub.add_parser("manifest", help="Print the manifest entries for a project")
    p_man.add_argument("pom", metavar="POM")
    p_man.set_defaults(func=cmd_manifest)

    # ── info ──────────────────────────────────────────────────────────────────
    p_info = sub.add_parser("info", help="Show the resolved configuration")
    p_info.set_defaults(func=cmd_info)

    return parser


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(args.func(args))

if __name__ == "__main__":
    main()
