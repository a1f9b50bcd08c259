"""Unit of concurrent work: fetch one artifact, then write it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pxb_diags.bundle.models import ArtifactKind, ContainerDescriptor, ResourceKind
from pxb_diags.bundle.writer import ArtifactWriter
from pxb_diags.collection.fetcher import ArtifactFetcher
from pxb_diags.config import DEFAULT_TAIL_LINES
from pxb_diags.errors import CollectorError

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"  # previous log requested for a container that never restarted
    FAILED = "failed"


@dataclass(frozen=True)
class CollectionTask:
    """One artifact of one instance (or one inventory) and where it goes."""

    kind: ResourceKind
    name: str
    namespace: str
    artifact: ArtifactKind
    path: Path
    container: ContainerDescriptor | None = None
    tail_lines: int = DEFAULT_TAIL_LINES

    @property
    def label(self) -> str:
        if self.container is not None:
            return (
                f"{self.artifact.label} of pod/{self.container.pod_name} "
                f"{self.container.role.value} {self.container.name}"
            )
        if self.artifact is ArtifactKind.RESOURCE_LIST:
            return f"{self.kind.value} list"
        return f"{self.artifact.label} of {self.kind.value}/{self.name}"

    def fetch(self, fetcher: ArtifactFetcher) -> str:
        if self.artifact is ArtifactKind.SPEC:
            return fetcher.fetch_spec(self.kind, self.name, self.namespace)
        if self.artifact is ArtifactKind.DESCRIPTION:
            return fetcher.fetch_description(self.kind, self.name, self.namespace)
        if self.artifact is ArtifactKind.RESOURCE_LIST:
            return fetcher.fetch_resource_list(self.kind, self.namespace)
        if self.container is None:
            raise ValueError(f"{self.artifact.value} task without a container")
        return fetcher.fetch_logs(
            self.namespace,
            self.container,
            tail_lines=self.tail_lines,
            previous=self.artifact is ArtifactKind.PREVIOUS_LOG,
        )

    def run(self, fetcher: ArtifactFetcher, writer: ArtifactWriter) -> TaskOutcome:
        """Fetch then write. Never raises: every failure becomes a FAILED outcome."""
        try:
            content = self.fetch(fetcher)
            if self.artifact is ArtifactKind.PREVIOUS_LOG and not content:
                logger.debug("Skipping %s: no previous container instance", self.label)
                return TaskOutcome(self, TaskStatus.SKIPPED)
            writer.write(self.path, content)
        except CollectorError as e:
            logger.error("Error collecting %s: %s", self.label, e)
            return TaskOutcome(self, TaskStatus.FAILED, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error collecting %s", self.label)
            return TaskOutcome(self, TaskStatus.FAILED, error=f"{type(e).__name__}: {e}")
        logger.info("Wrote %s to %s", self.label, self.path)
        return TaskOutcome(self, TaskStatus.WRITTEN)


@dataclass(frozen=True)
class TaskOutcome:
    task: CollectionTask
    status: TaskStatus
    error: str | None = None
