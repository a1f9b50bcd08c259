"""Bundle layer: artifact model, on-disk layout and writer."""

from pxb_diags.bundle.layout import (
    BUNDLE_DIRNAME,
    DEFAULT_BUNDLE_ROOT,
    BundleLayout,
    plan_path,
    resolve_bundle_root,
)
from pxb_diags.bundle.models import (
    LIST_ARTIFACT_KINDS,
    TRACKED_KINDS,
    ArtifactKind,
    ContainerDescriptor,
    ContainerRole,
    ResourceInstance,
    ResourceKind,
)
from pxb_diags.bundle.writer import ArtifactWriter

__all__ = [
    "ArtifactKind",
    "ArtifactWriter",
    "BUNDLE_DIRNAME",
    "BundleLayout",
    "ContainerDescriptor",
    "ContainerRole",
    "DEFAULT_BUNDLE_ROOT",
    "LIST_ARTIFACT_KINDS",
    "ResourceInstance",
    "ResourceKind",
    "TRACKED_KINDS",
    "plan_path",
    "resolve_bundle_root",
]
