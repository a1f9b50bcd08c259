"""Deterministic file layout of a diagnostics bundle."""

from __future__ import annotations

import logging
from pathlib import Path

from pxb_diags.bundle.models import (
    LIST_ARTIFACT_KINDS,
    TRACKED_KINDS,
    ArtifactKind,
    ContainerDescriptor,
    ResourceKind,
)
from pxb_diags.errors import FilesystemError

logger = logging.getLogger(__name__)

BUNDLE_DIRNAME = "pxb-diags-output"
DEFAULT_BUNDLE_ROOT = Path("/tmp") / BUNDLE_DIRNAME

LOGS_DIRNAME = "logs"
PREVIOUS_LOGS_DIRNAME = "logs-previous"
SPEC_DIRNAME = "spec"
DESCRIBE_DIRNAME = "describe"


def resolve_bundle_root(output_dir: str | Path | None) -> Path:
    """Return the bundle root for an optional operator-supplied output directory."""
    if output_dir is None or str(output_dir) == "":
        return DEFAULT_BUNDLE_ROOT
    return Path(output_dir) / BUNDLE_DIRNAME


def plan_path(
    root: Path,
    kind: ResourceKind,
    name: str,
    artifact: ArtifactKind,
    container: ContainerDescriptor | None = None,
) -> Path:
    """Map (kind, instance name, artifact) to its path inside the bundle.

    Log artifacts are keyed by the container descriptor; ``name`` is then the pod name.
    Resource lists ignore ``name`` and are keyed by the kind alone.
    """
    if artifact is ArtifactKind.RESOURCE_LIST:
        return root / f"{kind.value}_list.txt"

    if artifact in (ArtifactKind.CURRENT_LOG, ArtifactKind.PREVIOUS_LOG):
        if container is None:
            raise ValueError(f"{artifact.value} requires a container descriptor")
        dirname = LOGS_DIRNAME if artifact is ArtifactKind.CURRENT_LOG else PREVIOUS_LOGS_DIRNAME
        return root / dirname / f"{container.pod_name}_{container.name}_{container.role.value}.log"

    if artifact not in kind.artifacts:
        raise ValueError(f"{kind.value} does not collect {artifact.value}")

    kind_dir = root / kind.directory
    if artifact is ArtifactKind.DESCRIPTION:
        return kind_dir / DESCRIBE_DIRNAME / f"{name}.txt"
    if kind.describable:
        return kind_dir / SPEC_DIRNAME / f"{name}.yaml"
    # Spec-only kinds keep their manifests directly under the kind directory
    # (configmap/<name>.yaml): px-backup support tooling reads bundles in this layout.
    return kind_dir / f"{name}.yaml"


class BundleLayout:
    """Root directory of one bundle plus the fixed directory skeleton tasks write into."""

    def __init__(
        self,
        root: Path,
        kinds: tuple[ResourceKind, ...] = TRACKED_KINDS,
        list_kinds: tuple[ResourceKind, ...] = LIST_ARTIFACT_KINDS,
    ) -> None:
        self.root = Path(root)
        self.kinds = kinds
        self.list_kinds = list_kinds

    def path_for(
        self,
        kind: ResourceKind,
        name: str,
        artifact: ArtifactKind,
        container: ContainerDescriptor | None = None,
    ) -> Path:
        return plan_path(self.root, kind, name, artifact, container)

    def log_path(self, container: ContainerDescriptor, previous: bool = False) -> Path:
        artifact = ArtifactKind.PREVIOUS_LOG if previous else ArtifactKind.CURRENT_LOG
        return plan_path(self.root, ResourceKind.POD, container.pod_name, artifact, container)

    def list_path(self, kind: ResourceKind) -> Path:
        return plan_path(self.root, kind, "", ArtifactKind.RESOURCE_LIST)

    def directories(self) -> list[Path]:
        """Every directory a collection task may write into, root first."""
        dirs: list[Path] = [self.root]
        for kind in self.kinds:
            for artifact in kind.artifacts:
                parent = self.path_for(kind, "_", artifact).parent
                if parent not in dirs:
                    dirs.append(parent)
        if ResourceKind.POD in self.kinds:
            dirs.append(self.root / LOGS_DIRNAME)
            dirs.append(self.root / PREVIOUS_LOGS_DIRNAME)
        return dirs

    def ensure(self) -> list[Path]:
        """Create the directory skeleton. Idempotent; raises FilesystemError on the first failure."""
        created = self.directories()
        for directory in created:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError(f"Error creating directory {directory}: {e}") from e
        logger.debug("Bundle layout ready under %s (%d directories)", self.root, len(created))
        return created
