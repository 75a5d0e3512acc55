"""Error types raised by the warbuild core."""
from pathlib import Path
from typing import Optional


class WarBuildError(Exception):
    """Base class for every error the hook layer knows how to report."""


class PomError(WarBuildError):
    """A pom.xml could not be read or parsed."""


class DuplicatePluginDeclaration(WarBuildError):
    """The build declares the same plugin more than once."""

    def __init__(self, group_id: str, artifact_id: str) -> None:
        self.group_id = group_id
        self.artifact_id = artifact_id
        super().__init__(
            f"The build contains multiple versions of plugin {group_id}:{artifact_id}"
        )


class PatchTargetMissing(WarBuildError):
    """The file to patch does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"{path} does not exist")


class PatchIOFailure(WarBuildError):
    """The file to patch could not be read, decoded or written."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"failed patching {path}: {cause}")
