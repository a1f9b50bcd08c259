"""Enumerate the instances of each tracked resource kind."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pxb_diags.bundle.models import ResourceInstance, ResourceKind
from pxb_diags.cluster.reader import ClusterReader
from pxb_diags.errors import ClusterAPIError, ListError

logger = logging.getLogger(__name__)


@dataclass
class Discovery:
    """Snapshot of instances per kind, plus the kinds whose listing failed."""

    namespace: str
    instances: dict[ResourceKind, list[ResourceInstance]] = field(default_factory=dict)
    errors: dict[ResourceKind, ListError] = field(default_factory=dict)


class ResourceLister:
    def __init__(self, reader: ClusterReader) -> None:
        self.reader = reader

    def list(self, kind: ResourceKind, namespace: str) -> list[ResourceInstance]:
        try:
            instances = self.reader.list_resources(kind, namespace)
        except ClusterAPIError as e:
            raise ListError(kind.value, namespace, str(e)) from e
        logger.info("Found %d %s(s) in namespace %s", len(instances), kind.value, namespace)
        return instances

    def discover(self, kinds: tuple[ResourceKind, ...], namespace: str) -> Discovery:
        """List every kind in turn; a failing kind is recorded and skipped."""
        discovery = Discovery(namespace=namespace)
        for kind in kinds:
            try:
                discovery.instances[kind] = self.list(kind, namespace)
            except ListError as e:
                logger.error("%s", e)
                discovery.errors[kind] = e
        return discovery
