import random
from datetime import datetime, timedelta
from uuid import uuid4

from frontdesk.db.models import QueueEntry, QueuePriority, QueueStatus
from frontdesk.services.queue_policy import apply_status, can_transition, sort_queue


def make_entry(number, priority=QueuePriority.NORMAL, status=QueueStatus.WAITING):
    return QueueEntry(
        patient_id=uuid4(),
        doctor_id=uuid4(),
        queue_number=number,
        priority=priority,
        status=status,
    )


def test_urgent_entries_come_first():
    entries = [
        make_entry(1),
        make_entry(3, QueuePriority.URGENT),
        make_entry(2),
        make_entry(5, QueuePriority.URGENT),
    ]

    ordered = sort_queue(entries)

    assert [(e.priority, e.queue_number) for e in ordered] == [
        (QueuePriority.URGENT, 3),
        (QueuePriority.URGENT, 5),
        (QueuePriority.NORMAL, 1),
        (QueuePriority.NORMAL, 2),
    ]


def test_order_holds_for_shuffled_queues():
    rng = random.Random(7)
    for _ in range(50):
        entries = [
            make_entry(n, rng.choice([QueuePriority.NORMAL, QueuePriority.URGENT]))
            for n in rng.sample(range(1, 100), 12)
        ]
        rng.shuffle(entries)

        ordered = sort_queue(entries)

        priorities = [e.priority for e in ordered]
        urgent_count = priorities.count(QueuePriority.URGENT)
        assert priorities == [QueuePriority.URGENT] * urgent_count + [QueuePriority.NORMAL] * (12 - urgent_count)
        for group in (ordered[:urgent_count], ordered[urgent_count:]):
            numbers = [e.queue_number for e in group]
            assert numbers == sorted(numbers)


def test_status_only_moves_forward():
    assert can_transition(QueueStatus.WAITING, QueueStatus.WITH_DOCTOR)
    assert can_transition(QueueStatus.WITH_DOCTOR, QueueStatus.COMPLETED)
    assert can_transition(QueueStatus.WAITING, QueueStatus.COMPLETED)
    assert can_transition(QueueStatus.WITH_DOCTOR, QueueStatus.WITH_DOCTOR)
    assert not can_transition(QueueStatus.WITH_DOCTOR, QueueStatus.WAITING)
    assert not can_transition(QueueStatus.COMPLETED, QueueStatus.WITH_DOCTOR)


def test_called_at_is_stamped_once():
    entry = make_entry(4, QueuePriority.URGENT)
    first = datetime(2026, 3, 2, 9, 0)

    apply_status(entry, QueueStatus.WITH_DOCTOR, first)
    apply_status(entry, QueueStatus.WITH_DOCTOR, first + timedelta(minutes=5))

    assert entry.called_at == first
    assert entry.queue_number == 4
    assert entry.priority == QueuePriority.URGENT


def test_completion_keeps_called_at():
    entry = make_entry(1)
    called = datetime(2026, 3, 2, 9, 0)
    done = called + timedelta(minutes=12)

    apply_status(entry, QueueStatus.WITH_DOCTOR, called)
    apply_status(entry, QueueStatus.COMPLETED, done)

    assert entry.status == QueueStatus.COMPLETED
    assert entry.called_at == called
    assert entry.completed_at == done
    assert entry.updated_at == done


def test_completing_from_waiting_leaves_called_at_empty():
    entry = make_entry(1)

    apply_status(entry, QueueStatus.COMPLETED, datetime(2026, 3, 2, 10, 0))

    assert entry.called_at is None
    assert entry.completed_at is not None
