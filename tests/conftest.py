"""Shared fixtures: an in-memory ClusterReader and instance builders."""

from __future__ import annotations

import threading
from collections.abc import Iterator

import pytest

from pxb_diags.bundle import ContainerDescriptor, ContainerRole, ResourceInstance, ResourceKind
from pxb_diags.errors import ClusterAPIError


def make_instance(kind: ResourceKind, name: str, namespace: str = "ns1") -> ResourceInstance:
    return ResourceInstance(kind=kind, name=name, namespace=namespace)


def make_pod(
    name: str,
    init: tuple[str, ...] = (),
    main: tuple[str, ...] = ("app",),
    namespace: str = "ns1",
) -> ResourceInstance:
    containers = [ContainerDescriptor(pod_name=name, name=c, role=ContainerRole.INIT) for c in init]
    containers += [ContainerDescriptor(pod_name=name, name=c, role=ContainerRole.MAIN) for c in main]
    return ResourceInstance(kind=ResourceKind.POD, name=name, namespace=namespace, containers=tuple(containers))


class FakeClusterReader:
    """ClusterReader over in-memory data with injectable failures.

    ``fail`` holds keys that raise ClusterAPIError:
      ("spec" | "describe", kind, name), ("list", resource), ("logs", pod, container, previous).
    A previous-log request for a container without an entry in ``previous_logs`` raises
    the API's "previous terminated container ... not found" error.
    """

    def __init__(
        self,
        instances: dict[ResourceKind, list[ResourceInstance]] | None = None,
        logs: dict[tuple[str, str], list[bytes]] | None = None,
        previous_logs: dict[tuple[str, str], list[bytes]] | None = None,
        services: dict[str, str] | None = None,
        fail: set[tuple] | None = None,
        list_failures: set[ResourceKind] | None = None,
    ) -> None:
        self.instances = instances or {}
        self.logs = logs or {}
        self.previous_logs = previous_logs or {}
        self.services = services or {}
        self.fail = fail or set()
        self.list_failures = list_failures or set()
        self.calls: list[tuple] = []
        self._lock = threading.Lock()

    def _record(self, *call: object) -> None:
        with self._lock:
            self.calls.append(call)

    def list_resources(self, kind: ResourceKind, namespace: str) -> list[ResourceInstance]:
        self._record("list_resources", kind, namespace)
        if kind in self.list_failures:
            raise ClusterAPIError("Forbidden", status=403, body=f"cannot list {kind.value}")
        return list(self.instances.get(kind, []))

    def get_manifest(self, kind: ResourceKind, name: str, namespace: str) -> str:
        self._record("get_manifest", kind, name, namespace)
        if ("spec", kind, name) in self.fail:
            raise ClusterAPIError("kubectl get exited with status 1", body=f'{kind.value} "{name}" not found')
        return f"apiVersion: v1\nkind: {kind.value}\nmetadata:\n  name: {name}\n  namespace: {namespace}\n"

    def describe(self, kind: ResourceKind, name: str, namespace: str) -> str:
        self._record("describe", kind, name, namespace)
        if ("describe", kind, name) in self.fail:
            raise ClusterAPIError("kubectl describe exited with status 1", body="error")
        return f"Name:         {name}\nNamespace:    {namespace}\nEvents:       <none>\n"

    def get_resource_list(self, resource: str, namespace: str | None) -> str:
        self._record("get_resource_list", resource, namespace)
        if ("list", resource) in self.fail:
            raise ClusterAPIError("kubectl get exited with status 1", body="the server doesn't have a resource type")
        return f"NAME   AGE\n{resource}-a   1d\n"

    def stream_logs(
        self,
        namespace: str,
        pod: str,
        container: str,
        tail_lines: int,
        previous: bool,
    ) -> Iterator[bytes]:
        self._record("stream_logs", pod, container, tail_lines, previous)
        if ("logs", pod, container, previous) in self.fail:
            raise ClusterAPIError("Internal Server Error", status=500, body="connection reset")
        if previous:
            if (pod, container) not in self.previous_logs:
                raise ClusterAPIError(
                    "Bad Request",
                    status=400,
                    body=f'previous terminated container "{container}" in pod "{pod}" not found',
                )
            yield from self.previous_logs[(pod, container)]
            return
        yield from self.logs.get((pod, container), [f"{pod}/{container} started\n".encode()])

    def find_service_namespace(self, service_name: str) -> str | None:
        self._record("find_service_namespace", service_name)
        return self.services.get(service_name)


@pytest.fixture
def fake_reader() -> FakeClusterReader:
    return FakeClusterReader()


@pytest.fixture
def bundle_root(tmp_path):
    return tmp_path / "pxb-diags-output"
