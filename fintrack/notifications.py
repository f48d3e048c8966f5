"""Alerts derived from the current totals and the goal list.

Nothing here is persisted; the list is rebuilt on every render.
"""

import logging
from datetime import datetime
from typing import Iterable, NamedTuple, Tuple

from fintrack.aggregates import Summary, days_until, goal_progress
from fintrack.config import NotificationSettings
from fintrack.domain import Goal, Notification

logger = logging.getLogger(__name__)

OVERSPENDING = "overspending"
GOAL_ACHIEVABLE = "goal-achievable"
GOAL_DEADLINE = "goal-deadline"
GOAL_OVERDUE = "goal-overdue"


class BadgeCounts(NamedTuple):
    high: int
    goals: int
    overspending: int


def _goal_notifications(
    goal: Goal, balance: float, now: datetime, settings: NotificationSettings
) -> list[Notification]:
    if goal_progress(goal) >= 100:
        return []

    found = []
    if settings.goal_achievements and balance >= goal.target_amount - goal.current_amount:
        found.append(Notification(GOAL_ACHIEVABLE, f'You can complete "{goal.title}"', "medium"))

    try:
        days = days_until(goal.deadline, now)
    except ValueError:
        logger.warning("Goal %s has an unreadable deadline %r", goal.id, goal.deadline)
        return found

    if settings.goal_deadline_reminders and 0 < days <= settings.reminder_days:
        found.append(Notification(GOAL_DEADLINE, f'"{goal.title}" due in {days} days', "medium"))
    if days < 0:
        found.append(Notification(GOAL_OVERDUE, f'"{goal.title}" is overdue', "high"))
    return found


def derive_notifications(
    summary: Summary,
    goals: Iterable[Goal],
    now: datetime,
    settings: NotificationSettings = NotificationSettings(),
) -> Tuple[Notification, ...]:
    """Overspending first, then each goal's checks in list order."""
    if not settings.enabled:
        return ()

    notifications: list[Notification] = []
    if settings.overspending_alerts and summary.is_overspending:
        notifications.append(Notification(OVERSPENDING, "Expenses exceed income", "high"))

    for goal in goals:
        notifications.extend(_goal_notifications(goal, summary.current_balance, now, settings))
    return tuple(notifications)


def badge_counts(notifications: Iterable[Notification]) -> BadgeCounts:
    notifications = tuple(notifications)
    return BadgeCounts(
        high=sum(1 for n in notifications if n.severity == "high"),
        goals=sum(1 for n in notifications if "goal" in n.type),
        overspending=sum(1 for n in notifications if n.type == OVERSPENDING),
    )
