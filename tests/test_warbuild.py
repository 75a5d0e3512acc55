"""Tests for the warbuild command line."""

from __future__ import annotations

from pathlib import Path

import pytest

from pom import BUILD_POM_NAME
from warbuild import build_parser, main

DUPLICATE_POM = """\
<project>
  <groupId>org.example</groupId>
  <artifactId>dup</artifactId>
  <build><plugins>
    <plugin><groupId>org.apache.maven.plugins</groupId><artifactId>maven-war-plugin</artifactId></plugin>
    <plugin><groupId>org.apache.maven.plugins</groupId><artifactId>maven-war-plugin</artifactId></plugin>
    <plugin><groupId>org.ibissource</groupId><artifactId>ibis-war-plugin</artifactId></plugin>
  </plugins></build>
</project>
"""


def _run(*argv: str) -> int:
    args = build_parser().parse_args(list(argv))
    return args.func(args)


def _migrate_args(*argv: str) -> tuple:
    return (
        "migrate",
        *argv,
        "--source", "org.apache.maven.plugins:maven-war-plugin",
        "--target", "org.ibissource:ibis-war-plugin",
    )


def test_migrate_writes_build_pom(write_pom) -> None:
    pom_path = write_pom()
    original = pom_path.read_text(encoding="utf-8")

    assert _run(*_migrate_args(str(pom_path))) == 0

    assert pom_path.read_text(encoding="utf-8") == original
    assert "<phase>package</phase>" in (pom_path.parent / BUILD_POM_NAME).read_text(encoding="utf-8")


def test_migrate_in_place(write_pom) -> None:
    pom_path = write_pom()
    assert _run(*_migrate_args(str(pom_path), "--in-place")) == 0
    assert not (pom_path.parent / BUILD_POM_NAME).exists()
    assert "<id>default-war</id>" not in pom_path.read_text(encoding="utf-8")


def test_migrate_skips_projects_without_target(write_pom) -> None:
    pom_path = write_pom(with_target=False)
    assert _run(*_migrate_args(str(pom_path))) == 0
    assert not (pom_path.parent / BUILD_POM_NAME).exists()


def test_migrate_fails_on_duplicate_plugin(tmp_path: Path) -> None:
    pom_path = tmp_path / "pom.xml"
    pom_path.write_text(DUPLICATE_POM, encoding="utf-8")
    assert _run(*_migrate_args(str(pom_path))) == 1
    assert not (tmp_path / BUILD_POM_NAME).exists()


def test_migrate_rejects_bad_coordinates(write_pom) -> None:
    pom_path = write_pom()
    assert _run("migrate", str(pom_path), "--source", "not-a-coordinate") == 2


def test_migrate_missing_pom(tmp_path: Path) -> None:
    assert _run(*_migrate_args(str(tmp_path / "pom.xml"))) == 1


def test_patch_web_xml_missing_file_policy(tmp_path: Path) -> None:
    missing = str(tmp_path / "web.xml")
    assert _run("patch-web-xml", missing) == 0
    assert _run("patch-web-xml", missing, "--fail-on-missing") == 1


def test_patch_web_xml_applies(tmp_path: Path) -> None:
    path = tmp_path / "web.xml"
    path.write_text("<!-- security-constraint></security-role -->", encoding="utf-8")
    assert _run("patch-web-xml", str(path)) == 0
    assert path.read_text(encoding="utf-8") == "<security-constraint></security-role>"


def test_assemble_command(write_pom, tmp_path: Path) -> None:
    pom_path = write_pom()
    webinf = pom_path.parent / "src" / "main" / "webapp" / "WEB-INF"
    webinf.mkdir(parents=True)
    (webinf / "web.xml").write_text("<!-- security-constraint>", encoding="utf-8")
    out = tmp_path / "out"

    assert _run("assemble", str(pom_path), str(out), "--no-java-classes") == 0
    assert (out / "WEB-INF" / "web.xml").read_text(encoding="utf-8") == "<security-constraint>"


def test_manifest_command(write_pom, capsys) -> None:
    assert _run("manifest", str(write_pom())) == 0
    assert "Build-Artifact: webapp" in capsys.readouterr().out


def test_main_exits_with_command_status(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["patch-web-xml", str(tmp_path / "web.xml"), "--fail-on-missing"])
    assert excinfo.value.code == 1


def test_migrate_writes_only_migrated_modules(tmp_path: Path, write_pom) -> None:
    write_pom("web", artifact_id="web")
    write_pom("api", artifact_id="api", with_target=False)
    (tmp_path / "pom.xml").write_text(
        "<project><groupId>org.example</groupId><artifactId>parent</artifactId>"
        "<packaging>pom</packaging>"
        "<modules><module>web</module><module>api</module></modules></project>",
        encoding="utf-8",
    )

    assert _run(*_migrate_args(str(tmp_path / "pom.xml"))) == 0

    assert (tmp_path / "web" / BUILD_POM_NAME).exists()
    assert not (tmp_path / "api" / BUILD_POM_NAME).exists()
    assert not (tmp_path / BUILD_POM_NAME).exists()
