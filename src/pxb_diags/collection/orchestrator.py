"""Orchestrator: plan layout → discover instances → collect artifacts → drain."""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pxb_diags.bundle.layout import BundleLayout
from pxb_diags.bundle.models import (
    LIST_ARTIFACT_KINDS,
    TRACKED_KINDS,
    ArtifactKind,
    ResourceInstance,
    ResourceKind,
)
from pxb_diags.bundle.writer import ArtifactWriter
from pxb_diags.cluster.namespace import NamespaceResolver
from pxb_diags.cluster.reader import ClusterReader
from pxb_diags.collection.fetcher import ArtifactFetcher
from pxb_diags.collection.lister import Discovery, ResourceLister
from pxb_diags.collection.tasks import CollectionTask, TaskOutcome, TaskStatus
from pxb_diags.config import DEFAULT_MAX_WORKERS, DEFAULT_TAIL_LINES

logger = logging.getLogger(__name__)


class RunPhase(str, Enum):
    PLANNING = "planning"
    DISCOVERING = "discovering"
    COLLECTING = "collecting"
    DRAINING = "draining"
    DONE = "done"


@dataclass
class BundleResult:
    """Outcome of a full collection run."""

    root: Path
    namespace: str
    discovery: Discovery
    outcomes: list[TaskOutcome] = field(default_factory=list)

    @property
    def written(self) -> list[TaskOutcome]:
        return [o for o in self.outcomes if o.status is TaskStatus.WRITTEN]

    @property
    def skipped(self) -> list[TaskOutcome]:
        return [o for o in self.outcomes if o.status is TaskStatus.SKIPPED]

    @property
    def failed(self) -> list[TaskOutcome]:
        return [o for o in self.outcomes if o.status is TaskStatus.FAILED]

    @property
    def complete(self) -> bool:
        return not self.failed and not self.discovery.errors

    def counts_by_artifact(self) -> dict[ArtifactKind, Counter[TaskStatus]]:
        counts: dict[ArtifactKind, Counter[TaskStatus]] = {}
        for o in self.outcomes:
            counts.setdefault(o.task.artifact, Counter())[o.status] += 1
        return counts


def plan_tasks(
    layout: BundleLayout,
    discovery: Discovery,
    tail_lines: int = DEFAULT_TAIL_LINES,
    list_kinds: tuple[ResourceKind, ...] = LIST_ARTIFACT_KINDS,
) -> list[CollectionTask]:
    """Every task of a run: per-instance artifacts, per-container logs and inventories."""
    namespace = discovery.namespace
    tasks: list[CollectionTask] = []
    for instances in discovery.instances.values():
        for instance in instances:
            tasks.extend(_instance_tasks(layout, instance, tail_lines))
    for kind in list_kinds:
        tasks.append(
            CollectionTask(
                kind=kind,
                name=kind.value,
                namespace=namespace,
                artifact=ArtifactKind.RESOURCE_LIST,
                path=layout.list_path(kind),
            )
        )
    return tasks


def _instance_tasks(layout: BundleLayout, instance: ResourceInstance, tail_lines: int) -> list[CollectionTask]:
    tasks = []
    if instance.kind is ResourceKind.POD:
        for artifact in (ArtifactKind.CURRENT_LOG, ArtifactKind.PREVIOUS_LOG):
            for container in (*instance.init_containers, *instance.main_containers):
                tasks.append(
                    CollectionTask(
                        kind=instance.kind,
                        name=instance.name,
                        namespace=instance.namespace,
                        artifact=artifact,
                        path=layout.log_path(container, previous=artifact is ArtifactKind.PREVIOUS_LOG),
                        container=container,
                        tail_lines=tail_lines,
                    )
                )
    for artifact in instance.kind.artifacts:
        tasks.append(
            CollectionTask(
                kind=instance.kind,
                name=instance.name,
                namespace=instance.namespace,
                artifact=artifact,
                path=layout.path_for(instance.kind, instance.name, artifact),
            )
        )
    return tasks


class CollectionOrchestrator:
    """Runs one collection: a layout, a namespace snapshot, and one task per artifact.

    Task failures are recorded in the result and never stop sibling tasks; only
    layout creation and namespace resolution errors propagate out of ``run``.
    """

    def __init__(
        self,
        reader: ClusterReader,
        layout: BundleLayout,
        resolver: NamespaceResolver | None = None,
        tail_lines: int = DEFAULT_TAIL_LINES,
        max_workers: int = DEFAULT_MAX_WORKERS,
        writer: ArtifactWriter | None = None,
    ) -> None:
        self.layout = layout
        self.resolver = resolver or NamespaceResolver(reader)
        self.lister = ResourceLister(reader)
        self.fetcher = ArtifactFetcher(reader)
        self.writer = writer or ArtifactWriter()
        self.tail_lines = tail_lines
        self.max_workers = max_workers
        self.phase = RunPhase.PLANNING

    def _enter(self, phase: RunPhase) -> None:
        self.phase = phase
        logger.debug("Collection phase: %s", phase.value)

    def run(self, namespace: str | None = None) -> BundleResult:
        self._enter(RunPhase.PLANNING)
        self.layout.ensure()

        self._enter(RunPhase.DISCOVERING)
        ns = self.resolver.resolve(namespace)
        logger.info("Gathering resources from namespace %s into %s", ns, self.layout.root)
        discovery = self.lister.discover(self.layout.kinds, ns)

        tasks = plan_tasks(self.layout, discovery, self.tail_lines, self.layout.list_kinds)
        outcomes = self.collect(tasks)

        self._enter(RunPhase.DONE)
        result = BundleResult(root=self.layout.root, namespace=ns, discovery=discovery, outcomes=outcomes)
        logger.info(
            "Collected %d artifacts (%d skipped, %d failed) in %s",
            len(result.written),
            len(result.skipped),
            len(result.failed),
            result.root,
        )
        return result

    def collect(self, tasks: list[CollectionTask]) -> list[TaskOutcome]:
        """Run tasks on a bounded pool and wait for every one of them."""
        self._enter(RunPhase.COLLECTING)
        outcomes: list[TaskOutcome] = []
        if not tasks:
            self._enter(RunPhase.DRAINING)
            return outcomes
        with ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(tasks)),
            thread_name_prefix="pxb-collect",
        ) as executor:
            futures: dict[Future[TaskOutcome], CollectionTask] = {
                executor.submit(task.run, self.fetcher, self.writer): task for task in tasks
            }
            self._enter(RunPhase.DRAINING)
            try:
                for fut in as_completed(futures):
                    outcomes.append(fut.result())
            except KeyboardInterrupt:
                logger.warning("Interrupted; cancelling %d pending tasks", sum(not f.done() for f in futures))
                executor.shutdown(wait=False, cancel_futures=True)
                raise
        return outcomes


def collect_bundle(
    reader: ClusterReader,
    root: Path,
    namespace: str | None = None,
    tail_lines: int = DEFAULT_TAIL_LINES,
    max_workers: int = DEFAULT_MAX_WORKERS,
    marker_service: str | None = None,
    kinds: tuple[ResourceKind, ...] = TRACKED_KINDS,
) -> BundleResult:
    """Collect a bundle under ``root`` with the default layout and writer."""
    resolver = NamespaceResolver(reader, marker_service) if marker_service else NamespaceResolver(reader)
    orchestrator = CollectionOrchestrator(
        reader,
        BundleLayout(root, kinds=kinds),
        resolver=resolver,
        tail_lines=tail_lines,
        max_workers=max_workers,
    )
    return orchestrator.run(namespace)
