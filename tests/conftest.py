"""Shared fixtures for warbuild tests."""

from __future__ import annotations

import textwrap
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Optional

import pytest

from config import MigrationSettings
from pom import Plugin, PluginExecution, PluginIdentity, ProjectModel

MAVEN_WAR = PluginIdentity("org.apache.maven.plugins", "maven-war-plugin")
IBIS_WAR = PluginIdentity("org.ibissource", "ibis-war-plugin")

WAR_POM = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>org.example</groupId>
  <artifactId>{artifact_id}</artifactId>
  <version>1.2.3</version>
  <packaging>war</packaging>
  <name>Example Webapp</name>
  <description>An example webapp</description>
  <!-- packaging is handled by the WAR plugins below -->
  <build>
    <plugins>
      <plugin>
        <groupId>org.apache.maven.plugins</groupId>
        <artifactId>maven-war-plugin</artifactId>
        <version>3.4.0</version>
        <configuration>
          <warName>app</warName>
        </configuration>
        <executions>
          <execution>
            <id>default-war</id>
            <phase>package</phase>
            <goals><goal>war</goal></goals>
          </execution>
          <execution>
            <id>exploded</id>
            <phase>prepare-package</phase>
            <goals><goal>exploded</goal></goals>
          </execution>
        </executions>
      </plugin>
      {extra_plugins}
    </plugins>
  </build>
</project>
"""

IBIS_PLUGIN_XML = """\
<plugin>
        <groupId>org.ibissource</groupId>
        <artifactId>ibis-war-plugin</artifactId>
        <version>1.0</version>
      </plugin>"""


@pytest.fixture
def settings() -> MigrationSettings:
    return MigrationSettings(
        source=MAVEN_WAR,
        target=IBIS_WAR,
        execution_id="injected-ibis-war-plugin",
        goal="war",
        phase="package",
    )


@pytest.fixture
def write_pom(tmp_path: Path) -> Callable[..., Path]:
    """Write a WAR project pom below *tmp_path* and return its path."""

    def _write(
        subdir: str = "app",
        *,
        artifact_id: str = "webapp",
        with_target: bool = True,
        body: Optional[str] = None,
    ) -> Path:
        project_dir = tmp_path / subdir
        project_dir.mkdir(parents=True, exist_ok=True)
        if body is None:
            body = WAR_POM.format(
                artifact_id=artifact_id,
                extra_plugins=IBIS_PLUGIN_XML if with_target else "",
            )
        pom_path = project_dir / "pom.xml"
        pom_path.write_text(textwrap.dedent(body), encoding="utf-8")
        return pom_path

    return _write


def make_plugin(
    identity: PluginIdentity,
    *,
    executions: int = 0,
    configuration: Optional[ET.Element] = None,
) -> Plugin:
    return Plugin(
        group_id=identity.group_id,
        artifact_id=identity.artifact_id,
        configuration=configuration,
        executions=[
            PluginExecution(id=f"exec-{i}", phase="package", goals=["war"])
            for i in range(executions)
        ],
    )


def make_project(artifact_id: str, plugins: list[Plugin], tmp_dir: Path = Path("/tmp")) -> ProjectModel:
    return ProjectModel(
        path=tmp_dir / artifact_id / "pom.xml",
        name=artifact_id,
        group_id="org.example",
        artifact_id=artifact_id,
        version="1.0",
        plugins=plugins,
    )
