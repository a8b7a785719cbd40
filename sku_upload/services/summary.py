from __future__ import annotations

from collections.abc import Sequence

from ..models.workflow_result import RunStatus, WorkflowResult

"""Summary line rendering for the SKU upload CLI.

Format:
    SUMMARY files={n} completed={a} with_errors={b} failed={c} rejected={d}
    rows={rows} errors={errors}
"""

__all__ = [
    "render_summary_line",
]


def render_summary_line(results: Sequence[WorkflowResult]) -> str:
    """Render a SUMMARY line aggregating the results of several runs.

    Examples:
        >>> render_summary_line([])
        'SUMMARY files=0 completed=0 with_errors=0 failed=0 rejected=0 rows=0 errors=0'
    """
    counts = {status: 0 for status in RunStatus}
    for r in results:
        counts[r.status] += 1
    rows = sum(len(r.parsed_rows) for r in results)
    errors = sum(len(r.errors) for r in results)
    return (
        f"SUMMARY files={len(results)} "
        f"completed={counts[RunStatus.COMPLETED]} "
        f"with_errors={counts[RunStatus.COMPLETED_WITH_ERRORS]} "
        f"failed={counts[RunStatus.FAILED]} "
        f"rejected={counts[RunStatus.REJECTED]} "
        f"rows={rows} "
        f"errors={errors}"
    )
