"""Operator-facing summary printed once a bundle has drained."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pxb_diags.bundle.models import ArtifactKind
from pxb_diags.collection.orchestrator import BundleResult
from pxb_diags.collection.tasks import TaskStatus

COMPLETION_MESSAGE = "Resource gathering completed successfully and have been stored in {root}"

PARTIAL_NOTE = (
    "{failed} task(s) failed and {list_errors} resource kind(s) could not be listed; "
    "see the log above for details."
)


def build_summary_table(result: BundleResult) -> Table:
    table = Table(title=f"Namespace {result.namespace}", show_lines=False)
    table.add_column("Artifact")
    table.add_column("Written", justify="right", style="green")
    table.add_column("Skipped", justify="right", style="dim")
    table.add_column("Failed", justify="right", style="red")
    counts = result.counts_by_artifact()
    for artifact in ArtifactKind:
        c = counts.get(artifact)
        if not c:
            continue
        table.add_row(
            artifact.label,
            str(c[TaskStatus.WRITTEN]),
            str(c[TaskStatus.SKIPPED]),
            str(c[TaskStatus.FAILED]),
        )
    return table


def print_result(result: BundleResult, console: Console | None = None) -> None:
    """Print bundle summary to console using Rich."""
    c = console or Console()
    c.print(build_summary_table(result))
    if not result.complete:
        c.print(
            PARTIAL_NOTE.format(failed=len(result.failed), list_errors=len(result.discovery.errors)),
            style="yellow",
        )
        for kind, err in result.discovery.errors.items():
            c.print(f"  - list {kind.value}: {err}", markup=False)
        for outcome in result.failed:
            c.print(f"  - {outcome.task.label}: {outcome.error}", markup=False)
    c.print(
        Panel(COMPLETION_MESSAGE.format(root=result.root), title="pxb-diags", border_style="blue")
    )
