"""
Ordering and lifecycle rules of a doctor's queue.

Urgent entries are served before Normal ones; within the same priority the
lower queue number (earlier arrival) goes first. The same rule is used by the
SQL queries (``queue_order_by``) and in memory (``queue_sort_key``).
"""
from datetime import datetime
from typing import Iterable, List

from sqlalchemy import case

from frontdesk.db.models import QueueEntry, QueuePriority, QueueStatus

PRIORITY_RANK = {
    QueuePriority.URGENT: 0,
    QueuePriority.NORMAL: 1,
}

STATUS_RANK = {
    QueueStatus.WAITING: 0,
    QueueStatus.WITH_DOCTOR: 1,
    QueueStatus.COMPLETED: 2,
}


def queue_order_by():
    priority_rank = case(
        *[(QueueEntry.priority == priority, rank) for priority, rank in PRIORITY_RANK.items()],
        else_=len(PRIORITY_RANK),
    )
    return priority_rank.asc(), QueueEntry.queue_number.asc()


def queue_sort_key(entry: QueueEntry):
    return PRIORITY_RANK[QueuePriority(entry.priority)], entry.queue_number


def sort_queue(entries: Iterable[QueueEntry]) -> List[QueueEntry]:
    return sorted(entries, key=queue_sort_key)


def can_transition(current: QueueStatus, target: QueueStatus) -> bool:
    """Status only moves forward; staying put is allowed."""
    return STATUS_RANK[QueueStatus(target)] >= STATUS_RANK[QueueStatus(current)]


def apply_status(entry: QueueEntry, target: QueueStatus, now: datetime) -> None:
    """
    Set the status and stamp the matching timestamp.

    ``called_at`` and ``completed_at`` are written once; an entry completed
    straight from Waiting keeps ``called_at`` empty.
    """
    target = QueueStatus(target)
    entry.status = target
    if target == QueueStatus.WITH_DOCTOR and entry.called_at is None:
        entry.called_at = now
    elif target == QueueStatus.COMPLETED and entry.completed_at is None:
        entry.completed_at = now
    entry.updated_at = now
