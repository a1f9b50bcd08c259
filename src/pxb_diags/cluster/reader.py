"""Read-only capability the collector needs from a cluster."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from pxb_diags.bundle.models import ResourceInstance, ResourceKind


@runtime_checkable
class ClusterReader(Protocol):
    """Cluster reads used by discovery and collection.

    Every method raises ``ClusterAPIError`` when the cluster (or the kubectl process
    standing in for it) reports a failure. Implementations must be safe to call from
    several threads at once.
    """

    def list_resources(self, kind: ResourceKind, namespace: str) -> list[ResourceInstance]:
        """Instances of ``kind`` in ``namespace``; pods include their containers."""
        ...

    def get_manifest(self, kind: ResourceKind, name: str, namespace: str) -> str:
        """Re-applicable YAML manifest of one object."""
        ...

    def describe(self, kind: ResourceKind, name: str, namespace: str) -> str:
        """Human-readable description (status, conditions, events) of one object."""
        ...

    def get_resource_list(self, resource: str, namespace: str | None) -> str:
        """Tabular inventory of ``resource``; all namespaces when ``namespace`` is None."""
        ...

    def stream_logs(
        self,
        namespace: str,
        pod: str,
        container: str,
        tail_lines: int,
        previous: bool,
    ) -> Iterator[bytes]:
        """Log stream of one container, yielded in chunks until end of stream."""
        ...

    def find_service_namespace(self, service_name: str) -> str | None:
        """Namespace of the first service named ``service_name`` across the cluster."""
        ...
