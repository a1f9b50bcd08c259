"""Collection layer: discover → fetch → write, fanned out per artifact."""

from pxb_diags.collection.fetcher import ArtifactFetcher
from pxb_diags.collection.lister import Discovery, ResourceLister
from pxb_diags.collection.orchestrator import (
    BundleResult,
    CollectionOrchestrator,
    RunPhase,
    collect_bundle,
    plan_tasks,
)
from pxb_diags.collection.report import print_result
from pxb_diags.collection.tasks import CollectionTask, TaskOutcome, TaskStatus

__all__ = [
    "ArtifactFetcher",
    "BundleResult",
    "CollectionOrchestrator",
    "CollectionTask",
    "Discovery",
    "ResourceLister",
    "RunPhase",
    "TaskOutcome",
    "TaskStatus",
    "collect_bundle",
    "plan_tasks",
    "print_result",
]
