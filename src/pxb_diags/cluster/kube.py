"""ClusterReader backed by the kubernetes client and the kubectl binary."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import urllib3
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from pxb_diags.bundle.models import (
    ContainerDescriptor,
    ContainerRole,
    ResourceInstance,
    ResourceKind,
)
from pxb_diags.config import Settings
from pxb_diags.errors import ClientSetupError, ClusterAPIError, CredentialsError

logger = logging.getLogger(__name__)

# Bytes read from the log stream per iteration
LOG_CHUNK_SIZE = 2048


def resolve_kubeconfig(explicit: str | Path | None, settings: Settings | None = None) -> Path:
    """Return the kubeconfig path from the flag, else from settings/KUBECONFIG."""
    if explicit:
        return Path(explicit)
    if settings is not None and settings.kubeconfig:
        return Path(settings.kubeconfig)
    raise CredentialsError(
        "Set KUBECONFIG environment variable or provide the path to the kubeconfig file"
    )


def _load_kube_config(kubeconfig_path: Path, context: str | None) -> client.Configuration:
    """Load kubeconfig-based configuration into a standalone Configuration."""
    cfg = client.Configuration()
    kwargs: dict[str, Any] = {"config_file": str(kubeconfig_path), "client_configuration": cfg}
    if context:
        kwargs["context"] = context
    try:
        config.load_kube_config(**kwargs)
    except (config.ConfigException, OSError) as e:
        raise ClientSetupError(f"Unable to load kubeconfig {kubeconfig_path}: {e}") from e
    return cfg


def _api_error(e: ApiException) -> ClusterAPIError:
    body = e.body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    return ClusterAPIError(e.reason or "API error", status=e.status, body=body or "")


# API attribute and list method per instance-listed kind
_LIST_METHODS: dict[ResourceKind, tuple[str, str]] = {
    ResourceKind.POD: ("_core", "list_namespaced_pod"),
    ResourceKind.CONFIG_MAP: ("_core", "list_namespaced_config_map"),
    ResourceKind.RESOURCE_QUOTA: ("_core", "list_namespaced_resource_quota"),
    ResourceKind.PERSISTENT_VOLUME_CLAIM: ("_core", "list_namespaced_persistent_volume_claim"),
    ResourceKind.JOB: ("_batch", "list_namespaced_job"),
    ResourceKind.STATEFUL_SET: ("_apps", "list_namespaced_stateful_set"),
    ResourceKind.DEPLOYMENT: ("_apps", "list_namespaced_deployment"),
    ResourceKind.NETWORK_POLICY: ("_networking", "list_namespaced_network_policy"),
}


def _build_containers(pod: Any) -> tuple[ContainerDescriptor, ...]:
    """Init containers first, then main containers, each in spec order."""
    name = pod.metadata.name
    spec = pod.spec
    out = [
        ContainerDescriptor(pod_name=name, name=c.name, role=ContainerRole.INIT)
        for c in (getattr(spec, "init_containers", None) or [])
    ]
    out.extend(
        ContainerDescriptor(pod_name=name, name=c.name, role=ContainerRole.MAIN)
        for c in (getattr(spec, "containers", None) or [])
    )
    return tuple(out)


def _build_instance(kind: ResourceKind, obj: Any, namespace: str) -> ResourceInstance:
    """Build ResourceInstance from a V1 object returned by a list call."""
    return ResourceInstance(
        kind=kind,
        name=obj.metadata.name,
        namespace=obj.metadata.namespace or namespace,
        containers=_build_containers(obj) if kind is ResourceKind.POD else (),
    )


class KubernetesClusterReader:
    """Lists objects and streams logs through the API; manifests, descriptions
    and inventories come from kubectl so they match what an operator would see."""

    def __init__(
        self,
        kubeconfig: Path,
        context: str | None = None,
        kubectl: str = "kubectl",
    ) -> None:
        self.kubeconfig = Path(kubeconfig)
        self.context = context
        self.kubectl = kubectl
        cfg = _load_kube_config(self.kubeconfig, context)
        api_client = client.ApiClient(cfg)
        self._core = client.CoreV1Api(api_client)
        self._apps = client.AppsV1Api(api_client)
        self._batch = client.BatchV1Api(api_client)
        self._networking = client.NetworkingV1Api(api_client)

    @classmethod
    def from_settings(cls, settings: Settings, kubeconfig: str | Path | None = None) -> KubernetesClusterReader:
        return cls(
            kubeconfig=resolve_kubeconfig(kubeconfig, settings),
            context=settings.context,
            kubectl=settings.kubectl,
        )

    def _list_call(self, kind: ResourceKind) -> Callable[..., Any]:
        try:
            api_attr, method = _LIST_METHODS[kind]
        except KeyError:
            raise ValueError(f"{kind.value} cannot be listed per instance") from None
        return getattr(getattr(self, api_attr), method)

    def list_resources(self, kind: ResourceKind, namespace: str) -> list[ResourceInstance]:
        list_call = self._list_call(kind)
        try:
            ret = list_call(namespace=namespace)
        except ApiException as e:
            raise _api_error(e) from e
        return [_build_instance(kind, obj, namespace) for obj in ret.items]

    def find_service_namespace(self, service_name: str) -> str | None:
        try:
            services = self._core.list_service_for_all_namespaces()
        except ApiException as e:
            raise _api_error(e) from e
        for svc in services.items:
            if svc.metadata.name == service_name:
                return svc.metadata.namespace
        return None

    def stream_logs(
        self,
        namespace: str,
        pod: str,
        container: str,
        tail_lines: int,
        previous: bool,
    ) -> Iterator[bytes]:
        kwargs: dict[str, Any] = {
            "container": container,
            "previous": previous,
            "_preload_content": False,
        }
        if tail_lines > 0:
            kwargs["tail_lines"] = tail_lines
        try:
            resp = self._core.read_namespaced_pod_log(name=pod, namespace=namespace, **kwargs)
        except ApiException as e:
            raise _api_error(e) from e
        try:
            yield from resp.stream(LOG_CHUNK_SIZE)
        except (urllib3.exceptions.HTTPError, OSError) as e:
            raise ClusterAPIError(f"log stream interrupted: {e}") from e
        finally:
            resp.release_conn()

    def get_manifest(self, kind: ResourceKind, name: str, namespace: str) -> str:
        return self._kubectl("get", kind.value, name, "-n", namespace, "-o", "yaml")

    def describe(self, kind: ResourceKind, name: str, namespace: str) -> str:
        return self._kubectl("describe", kind.value, name, "-n", namespace)

    def get_resource_list(self, resource: str, namespace: str | None) -> str:
        if namespace is None:
            return self._kubectl("get", resource, "--all-namespaces")
        return self._kubectl("get", resource, "-n", namespace)

    def kubectl_command(self, *args: str) -> list[str]:
        cmd = [self.kubectl, *args, "--kubeconfig", str(self.kubeconfig)]
        if self.context:
            cmd.extend(["--context", self.context])
        return cmd

    def _kubectl(self, *args: str) -> str:
        cmd = self.kubectl_command(*args)
        logger.debug("Running %s", " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ClusterAPIError(f"unable to run {self.kubectl}: {e}") from e
        if completed.returncode != 0:
            raise ClusterAPIError(
                f"kubectl {' '.join(args[:3])} exited with status {completed.returncode}",
                body=completed.stderr,
            )
        return completed.stdout
