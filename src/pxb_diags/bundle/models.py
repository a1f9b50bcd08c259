"""Resource and artifact model shared by the lister, fetcher and orchestrator."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ArtifactKind(str, Enum):
    """Kinds of collected output; each maps to a fetch mode and a file naming rule."""

    SPEC = "spec"
    DESCRIPTION = "description"
    CURRENT_LOG = "current_log"
    PREVIOUS_LOG = "previous_log"
    RESOURCE_LIST = "resource_list"

    @property
    def label(self) -> str:
        return _ARTIFACT_LABELS[self]


class ResourceKind(str, Enum):
    """Cluster object classes tracked by the collector. Values are kubectl resource names."""

    JOB = "job"
    POD = "pod"
    CONFIG_MAP = "configmap"
    RESOURCE_QUOTA = "resourcequota"
    STATEFUL_SET = "statefulset"
    DEPLOYMENT = "deployment"
    NETWORK_POLICY = "networkpolicy"
    PERSISTENT_VOLUME_CLAIM = "persistentvolumeclaim"
    # Monitoring components are only inventoried, never listed per instance.
    PROMETHEUS = "prometheus"
    ALERTMANAGER = "alertmanager"

    @property
    def directory(self) -> str:
        """Directory name of this kind inside the bundle root."""
        return _KIND_DIRECTORIES.get(self, self.value)

    @property
    def list_only(self) -> bool:
        return self in LIST_ONLY_KINDS

    @property
    def describable(self) -> bool:
        return self in DESCRIBED_KINDS

    @property
    def artifacts(self) -> tuple[ArtifactKind, ...]:
        """Per-instance artifacts collected for this kind (logs are per container, see pods)."""
        if self.list_only:
            return ()
        if self.describable:
            return (ArtifactKind.SPEC, ArtifactKind.DESCRIPTION)
        return (ArtifactKind.SPEC,)


class ContainerRole(str, Enum):
    """Container role within a pod; the value is the suffix used in log file names."""

    INIT = "init-container"
    MAIN = "container"


_ARTIFACT_LABELS = {
    ArtifactKind.SPEC: "spec",
    ArtifactKind.DESCRIPTION: "description",
    ArtifactKind.CURRENT_LOG: "logs",
    ArtifactKind.PREVIOUS_LOG: "previous logs",
    ArtifactKind.RESOURCE_LIST: "list",
}

_KIND_DIRECTORIES = {
    ResourceKind.PERSISTENT_VOLUME_CLAIM: "pvc",
}

DESCRIBED_KINDS = frozenset(
    {
        ResourceKind.JOB,
        ResourceKind.POD,
        ResourceKind.STATEFUL_SET,
        ResourceKind.DEPLOYMENT,
        ResourceKind.PERSISTENT_VOLUME_CLAIM,
    }
)

LIST_ONLY_KINDS = frozenset({ResourceKind.PROMETHEUS, ResourceKind.ALERTMANAGER})

# Kinds listed per instance, in discovery order.
TRACKED_KINDS: tuple[ResourceKind, ...] = (
    ResourceKind.POD,
    ResourceKind.JOB,
    ResourceKind.CONFIG_MAP,
    ResourceKind.STATEFUL_SET,
    ResourceKind.DEPLOYMENT,
    ResourceKind.RESOURCE_QUOTA,
    ResourceKind.NETWORK_POLICY,
    ResourceKind.PERSISTENT_VOLUME_CLAIM,
)

# Kinds whose `kubectl get` inventory is saved as <resource>_list.txt.
LIST_ARTIFACT_KINDS: tuple[ResourceKind, ...] = (
    ResourceKind.POD,
    ResourceKind.PROMETHEUS,
    ResourceKind.ALERTMANAGER,
)


class ContainerDescriptor(BaseModel):
    """One container of a pod; drives log collection only."""

    model_config = ConfigDict(frozen=True)

    pod_name: str
    name: str
    role: ContainerRole = ContainerRole.MAIN


class ResourceInstance(BaseModel):
    """A concrete object of one resource kind in the target namespace."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    name: str
    namespace: str
    containers: tuple[ContainerDescriptor, ...] = Field(
        default=(),
        description="Pods only: init containers followed by main containers, in cluster order",
    )

    @property
    def init_containers(self) -> list[ContainerDescriptor]:
        return [c for c in self.containers if c.role is ContainerRole.INIT]

    @property
    def main_containers(self) -> list[ContainerDescriptor]:
        return [c for c in self.containers if c.role is ContainerRole.MAIN]
