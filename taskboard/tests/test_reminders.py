"""Unit tests for the reminder scanner and notification center."""

import asyncio
import threading
from datetime import timedelta

import pytest

from taskboard.models import NotificationType
from taskboard.services.dates import format_time_until
from taskboard.services.reminders import (
    NotificationCenter,
    ReminderScanner,
    run_reminder_scanner,
)


@pytest.fixture
def scanner(center):
    return ReminderScanner(center)


class TestEligibility:

    def test_due_within_lead_time(self, scanner, make_task, now):
        task = make_task(reminder=True, due_date=now + timedelta(minutes=20))
        assert scanner.due_soon([task], now) == [task]

    def test_boundaries(self, scanner, make_task, now):
        """Exactly 30 minutes out is in; already due or 31 minutes out is not."""
        at_limit = make_task(reminder=True, due_date=now + timedelta(minutes=30))
        too_far = make_task(reminder=True, due_date=now + timedelta(minutes=31))
        due_now = make_task(reminder=True, due_date=now)
        overdue = make_task(reminder=True, due_date=now - timedelta(minutes=1))

        assert scanner.due_soon([at_limit, too_far, due_now, overdue], now) == [at_limit]

    def test_completed_task_never_notifies(self, scanner, center, make_task, now):
        task = make_task(reminder=True, completed=True, due_date=now + timedelta(minutes=10))

        assert scanner.scan([task], now) == []
        assert center.tracked() == []

    def test_reminder_off_or_undated_is_skipped(self, scanner, make_task, now):
        silent = make_task(reminder=False, due_date=now + timedelta(minutes=10))
        undated = make_task(reminder=True)

        assert scanner.scan([silent, undated], now) == []

    def test_malformed_record_does_not_abort_scan(self, scanner, make_task, now):
        good = make_task(reminder=True, due_date=now + timedelta(minutes=5))

        emitted = scanner.scan([object(), good], now)

        assert [n.source_task_id for n in emitted] == [good.id]


class TestScan:

    def test_notification_contents(self, scanner, make_task, now):
        task = make_task(title="Pay rent", reminder=True, due_date=now + timedelta(minutes=20))

        (notification,) = scanner.scan([task], now)

        assert notification.type == NotificationType.REMINDER
        assert notification.title == "Task Reminder"
        assert notification.message == 'Your task "Pay rent" is due in 20 minutes.'
        assert notification.source_task_id == task.id
        assert notification.created_at == now
        assert notification.id.startswith(f"task-{task.id}-")
        assert notification.visible is True

    def test_duplicates_suppressed_within_window(self, scanner, center, make_task, now):
        """One reminder for two scans five minutes apart; another after the window."""
        task = make_task(reminder=True, due_date=now + timedelta(minutes=25))

        first = scanner.scan([task], now)
        second = scanner.scan([task], now + timedelta(minutes=5))
        assert len(first) == 1
        assert second == []
        assert len(center.active()) == 1

        third = scanner.scan([task], now + timedelta(minutes=20))
        assert len(third) == 1
        assert len(center.active()) == 2

    def test_same_due_time_notifies_each_task(self, scanner, make_task, now):
        due = now + timedelta(minutes=10)
        a = make_task(reminder=True, due_date=due)
        b = make_task(reminder=True, due_date=due)

        emitted = scanner.scan([a, b], now)

        assert {n.source_task_id for n in emitted} == {a.id, b.id}

    def test_dismissed_reminder_still_suppresses_until_purged(self, scanner, center, make_task, now):
        task = make_task(reminder=True, due_date=now + timedelta(minutes=25))
        (notification,) = scanner.scan([task], now)

        assert center.dismiss(notification.id, now + timedelta(minutes=1)) is True
        assert center.active() == []

        # Purged on the next pass, so the task may be reminded again
        assert len(scanner.scan([task], now + timedelta(minutes=2))) == 1


class TestNotificationCenter:

    def test_dismiss_twice_or_unknown(self, center, now):
        notification = center.add_custom(1, "Saved", "Task saved", NotificationType.SUCCESS, now)

        assert center.dismiss(notification.id, now) is True
        assert center.dismiss(notification.id, now) is False
        assert center.dismiss("missing", now) is False

    def test_purge_waits_for_removal_delay(self, center, now):
        notification = center.add_custom(1, "Hi", "There", now=now)
        center.dismiss(notification.id, now)

        assert center.purge(now + timedelta(milliseconds=100)) == 0
        assert center.tracked() == [notification]
        assert center.purge(now + timedelta(milliseconds=300)) == 1
        assert center.tracked() == []

    def test_active_is_scoped_by_user(self, center, now):
        mine = center.add_custom(1, "Mine", "x", now=now)
        center.add_custom(2, "Theirs", "y", now=now)

        assert center.active(1) == [mine]
        assert len(center.active()) == 2

    def test_custom_ids_are_unique(self, center, now):
        a = center.add_custom(1, "A", "a", now=now)
        b = center.add_custom(1, "B", "b", now=now)
        assert a.id != b.id
        assert a.id.startswith("manual-")

    def test_concurrent_adds_reads_and_purges(self, center, now):
        """Readers and purges from other threads never see a half-swapped list."""
        errors = []

        def writer(user_id):
            for i in range(100):
                center.add_custom(user_id, "Hi", str(i), now=now)

        def reader():
            try:
                for _ in range(100):
                    center.active(1)
                    center.recently_notified(1, now)
                    center.purge(now)
            except RuntimeError as exc:
                errors.append(exc)

        threads = [threading.Thread(target=writer, args=(u,)) for u in (1, 2)]
        threads += [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(center.tracked()) == 200
        assert len(center.active(1)) == 100

    @pytest.mark.asyncio
    async def test_publish_survives_failing_listener(self, center, now):
        received = []

        def broken(notification):
            raise RuntimeError("socket gone")

        async def collector(notification):
            received.append(notification)

        center.add_listener(broken)
        center.add_listener(collector)
        notification = center.add_custom(1, "Hi", "There", now=now)

        await center.publish(notification)

        assert received == [notification]


class TestRelativeTime:

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(seconds=10), "less than a minute"),
        (timedelta(seconds=70), "1 minute"),
        (timedelta(minutes=20), "20 minutes"),
        (timedelta(minutes=29, seconds=40), "30 minutes"),
        (timedelta(minutes=50), "about 1 hour"),
        (timedelta(hours=5), "about 5 hours"),
        (timedelta(days=3), "3 days"),
    ])
    def test_format_time_until(self, now, delta, expected):
        assert format_time_until(now + delta, now) == expected


class FakeStore:

    def __init__(self, tasks):
        self.tasks = tasks

    def user_ids(self):
        return [1]

    def list_tasks(self, user_id):
        return [t for t in self.tasks if t.user_id == user_id]


@pytest.mark.asyncio
async def test_scanner_loop_publishes_once(make_task, now):
    center = NotificationCenter()
    scanner = ReminderScanner(center)
    task = make_task(reminder=True, due_date=now + timedelta(minutes=10))
    published = []
    center.add_listener(published.append)

    runner = asyncio.create_task(
        run_reminder_scanner(FakeStore([task]), scanner, interval_seconds=0.01, clock=lambda: now)
    )

    await asyncio.sleep(0.05)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert len(published) == 1
    assert published[0].source_task_id == task.id


@pytest.mark.asyncio
async def test_scanner_loop_survives_store_errors(now):
    class BrokenStore:
        calls = 0

        def user_ids(self):
            BrokenStore.calls += 1
            raise RuntimeError("store down")

    runner = asyncio.create_task(
        run_reminder_scanner(BrokenStore(), ReminderScanner(NotificationCenter()),
                             interval_seconds=0.01, clock=lambda: now)
    )

    await asyncio.sleep(0.05)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert BrokenStore.calls > 1
