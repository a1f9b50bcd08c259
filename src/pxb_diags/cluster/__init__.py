"""Cluster layer: read-only access to the target cluster."""

from pxb_diags.cluster.kube import KubernetesClusterReader, resolve_kubeconfig
from pxb_diags.cluster.namespace import NamespaceResolver
from pxb_diags.cluster.reader import ClusterReader

__all__ = [
    "ClusterReader",
    "KubernetesClusterReader",
    "NamespaceResolver",
    "resolve_kubeconfig",
]
