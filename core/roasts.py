"""
Threshold tables that turn staleness (and progress) into a roast.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def days_since(moment: datetime, now: Optional[datetime] = None) -> int:
    """Whole days between `moment` and `now` (never negative)."""
    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return max(0, (now - moment).days)


def motivational_roast(days: int, progress: int) -> str:
    """One-liner shown on each dashboard card."""
    if days > 90 and progress < 30:
        return "This project is collecting more dust than your gym membership card."
    if days > 60 and progress < 50:
        return "Your project is aging like milk, not wine. Time to revive it!"
    if days > 30 and progress < 70:
        return "Another day, another excuse not to finish this project."
    if days > 14:
        return "Coffee's getting cold. Time to wake up and code!"
    return "You're on a roll! Don't stop now!"


def status_level(days: int) -> str:
    if days > 60:
        return "destructive"
    if days > 30:
        return "warning"
    if days > 14:
        return "info"
    return "success"


def weekly_roast(name: str, days: int, size_kb: Optional[int] = None, open_issues: Optional[int] = None) -> str:
    """Roast paragraph for the weekly reminder email."""
    if days > 30:
        roast = (
            f'Your project "{name}" hasn\'t seen a commit in {days} days! Even dinosaurs moved '
            "faster than your development pace. Is this a project or a digital fossil?"
        )
    elif days > 14:
        roast = (
            f'Two weeks without a commit to "{name}"? Your code must be feeling neglected. '
            "Even house plants get more attention!"
        )
    elif days > 7:
        roast = (
            f'A week without touching "{name}"? Your GitHub contribution graph is getting as '
            "empty as a developer's social calendar."
        )
    elif days > 3:
        roast = (
            f'{days} days since your last commit to "{name}". At this rate, you\'ll finish just '
            "in time for the retirement party."
        )
    else:
        roast = (
            f'Nice recent activity on "{name}", but let\'s be honest - we both know it won\'t '
            "last. Prove me wrong!"
        )

    if size_kb is not None and size_kb < 1000:
        roast += f" And with only {size_kb}KB? That's not a project, that's a digital sticky note!"
    if open_issues is not None and open_issues > 5:
        roast += f" With {open_issues} open issues, you're collecting bugs like they're trading cards."
    return roast


def fallback_roast(name: str) -> str:
    return (
        f'I tried to roast your project "{name}", but it\'s so inactive even my roasting '
        "algorithm got bored looking at it."
    )


__all__ = [
    "days_since",
    "motivational_roast",
    "status_level",
    "weekly_roast",
    "fallback_roast",
]
