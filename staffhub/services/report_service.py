"""
Report Service - task aggregates behind the analytics dashboard
"""

from collections import Counter
from typing import Dict, Iterable

from staffhub.schemas.tracking import (
    TASK_PRIORITIES,
    AssigneeSummary,
    DeadlineSummary,
    StatusCounts,
    Task,
    TaskReport,
)


def _bump(counts: StatusCounts, status: str) -> None:
    setattr(counts, status, getattr(counts, status) + 1)


def build_task_report(tasks: Iterable[Task]) -> TaskReport:
    """
    Summarize tasks by status, priority, assignee and deadline.

    Callers pass only the tasks the requester may see, so staff get a report
    over their own work and admins over everything.
    """
    tasks = list(tasks)

    by_status = StatusCounts()
    by_priority = Counter({priority: 0 for priority in TASK_PRIORITIES})
    by_assignee: Dict[str, AssigneeSummary] = {}
    by_deadline: Dict = {}

    for task in tasks:
        _bump(by_status, task.status)
        by_priority[task.priority] += 1

        if task.assignee_id not in by_assignee:
            by_assignee[task.assignee_id] = AssigneeSummary(assignee_id=task.assignee_id)
        _bump(by_assignee[task.assignee_id], task.status)

        if task.deadline is not None:
            if task.deadline not in by_deadline:
                by_deadline[task.deadline] = DeadlineSummary(deadline=task.deadline)
            _bump(by_deadline[task.deadline], task.status)

    return TaskReport(
        total=len(tasks),
        by_status=by_status,
        by_priority=dict(by_priority),
        by_assignee=list(by_assignee.values()),
        by_deadline=[by_deadline[day] for day in sorted(by_deadline)],
    )
