"""Fetch one artifact (manifest, description, logs or inventory) from the cluster."""

from __future__ import annotations

import logging

from pxb_diags.bundle.models import ArtifactKind, ContainerDescriptor, ResourceKind
from pxb_diags.cluster.reader import ClusterReader
from pxb_diags.config import DEFAULT_TAIL_LINES
from pxb_diags.errors import ClusterAPIError, FetchError, LogFetchError

logger = logging.getLogger(__name__)

# Marker in the API error returned when a container has never restarted
NO_PREVIOUS_CONTAINER = "previous terminated container"

# tail_lines value requesting the whole log
FULL_LOG = -1


class ArtifactFetcher:
    """Side-effect-free reads against the cluster; every failure becomes a FetchError."""

    def __init__(self, reader: ClusterReader) -> None:
        self.reader = reader

    def fetch_spec(self, kind: ResourceKind, name: str, namespace: str) -> str:
        try:
            return self.reader.get_manifest(kind, name, namespace)
        except ClusterAPIError as e:
            raise FetchError(kind.value, name, ArtifactKind.SPEC.label, str(e)) from e

    def fetch_description(self, kind: ResourceKind, name: str, namespace: str) -> str:
        try:
            return self.reader.describe(kind, name, namespace)
        except ClusterAPIError as e:
            raise FetchError(kind.value, name, ArtifactKind.DESCRIPTION.label, str(e)) from e

    def fetch_resource_list(self, kind: ResourceKind, namespace: str | None) -> str:
        try:
            return self.reader.get_resource_list(kind.value, namespace)
        except ClusterAPIError as e:
            raise FetchError(kind.value, namespace or "*", ArtifactKind.RESOURCE_LIST.label, str(e)) from e

    def fetch_logs(
        self,
        namespace: str,
        container: ContainerDescriptor,
        tail_lines: int = DEFAULT_TAIL_LINES,
        previous: bool = False,
    ) -> str:
        """Drain the container log stream to the end and return it as text.

        ``tail_lines`` <= 0 requests the full log. For ``previous`` logs of a container
        that never restarted, returns an empty string instead of raising.
        """
        artifact = ArtifactKind.PREVIOUS_LOG if previous else ArtifactKind.CURRENT_LOG
        ref = f"{container.pod_name}/{container.name}"
        try:
            chunks = self.reader.stream_logs(
                namespace=namespace,
                pod=container.pod_name,
                container=container.name,
                tail_lines=tail_lines,
                previous=previous,
            )
            data = b"".join(chunks)
        except ClusterAPIError as e:
            if previous and NO_PREVIOUS_CONTAINER in str(e):
                logger.debug("No previous terminated container for %s", ref)
                return ""
            raise LogFetchError(ResourceKind.POD.value, ref, artifact.label, str(e)) from e
        return data.decode("utf-8", errors="replace")
