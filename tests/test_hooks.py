"""Tests for the lifecycle hook adapter."""

from __future__ import annotations

from pathlib import Path

import pytest

import hooks as hooksmod
from config import WarSettings
from conftest import IBIS_WAR, MAVEN_WAR, make_plugin, make_project
from errors import PatchTargetMissing
from hooks import HookContext, HookResult


def _ctx(tmp_path: Path, **settings) -> HookContext:
    project = make_project("webapp", [], tmp_path)
    return HookContext(project=project, webapp_dir=tmp_path / "out", settings=WarSettings(**settings))


def test_after_projects_read_counts_migrations(settings) -> None:
    p1 = make_project("p1", [make_plugin(MAVEN_WAR, executions=1), make_plugin(IBIS_WAR)])
    p2 = make_project("p2", [make_plugin(IBIS_WAR)])

    result = hooksmod.after_projects_read([p1, p2], settings)

    assert result.success
    assert result.replaced == 1
    assert result.migrated == [p1]


def test_after_projects_read_fails_on_duplicate(settings) -> None:
    project = make_project("p", [make_plugin(MAVEN_WAR), make_plugin(MAVEN_WAR), make_plugin(IBIS_WAR)])

    result = hooksmod.after_projects_read([project], settings)

    assert not result.success
    assert "org.apache.maven.plugins:maven-war-plugin" in result.message


def test_war_before_assembly_defaults_source_directory(tmp_path: Path) -> None:
    ctx = _ctx(tmp_path, package_java_classes=True)

    result = hooksmod.war_before_assembly(ctx)

    assert result.success
    assert [r.target_path for r in ctx.settings.web_resources] == ["WEB-INF/classes"]
    assert ctx.settings.web_resources[0].directory == ctx.project.project_dir / "src" / "main" / "java"
    assert ctx.settings.packaging_excludes == [".gitignore"]


def test_war_after_assembly_skipped_when_disabled(tmp_path: Path) -> None:
    ctx = _ctx(tmp_path, enable_security_constraints=False, fail_on_missing_web_xml=True)
    assert hooksmod.war_after_assembly(ctx).success


def test_war_after_assembly_raises_for_strict_missing_web_xml(tmp_path: Path) -> None:
    ctx = _ctx(tmp_path, enable_security_constraints=True, fail_on_missing_web_xml=True)
    with pytest.raises(PatchTargetMissing):
        hooksmod.war_after_assembly(ctx)
    assert hooksmod.run_hooks("after_assembly", hooksmod.AFTER_ASSEMBLY, ctx) is False


def test_run_hooks_stops_at_first_failure(tmp_path: Path) -> None:
    calls = []

    def first(ctx):
        calls.append("first")
        return HookResult(success=False, message="nope")

    def second(ctx):
        calls.append("second")
        return HookResult()

    assert hooksmod.run_hooks("before_assembly", [first, second], _ctx(tmp_path)) is False
    assert calls == ["first"]


def test_run_hooks_propagates_unexpected_errors(tmp_path: Path) -> None:
    def broken(ctx):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        hooksmod.run_hooks("before_assembly", [broken], _ctx(tmp_path))
