from datetime import datetime, timedelta, timezone

import pytest

from core.roasts import days_since, fallback_roast, motivational_roast, status_level, weekly_roast

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def test_days_since_counts_whole_days():
    assert days_since(NOW - timedelta(days=10, hours=5), NOW) == 10


def test_days_since_never_negative_and_accepts_naive():
    assert days_since(NOW + timedelta(days=3), NOW) == 0
    assert days_since(datetime(2025, 5, 30), NOW) == 2


@pytest.mark.parametrize(
    "days,progress,fragment",
    [
        (120, 10, "gym membership"),
        (120, 40, "aging like milk"),
        (45, 60, "another excuse"),
        (45, 90, "Coffee's getting cold"),
        (3, 0, "on a roll"),
    ],
)
def test_motivational_roast_thresholds(days, progress, fragment):
    assert fragment.lower() in motivational_roast(days, progress).lower()


@pytest.mark.parametrize("days,level", [(61, "destructive"), (31, "warning"), (15, "info"), (14, "success")])
def test_status_level(days, level):
    assert status_level(days) == level


def test_weekly_roast_by_staleness():
    assert "digital fossil" in weekly_roast("api", 40)
    assert "Two weeks" in weekly_roast("api", 20)
    assert "A week" in weekly_roast("api", 10)
    assert "5 days since" in weekly_roast("api", 5)
    assert "Nice recent activity" in weekly_roast("api", 1)


def test_weekly_roast_appends_size_and_issue_remarks():
    roast = weekly_roast("api", 1, size_kb=200, open_issues=9)
    assert "200KB" in roast
    assert "9 open issues" in roast

    plain = weekly_roast("api", 1, size_kb=5000, open_issues=2)
    assert "KB" not in plain
    assert "open issues" not in plain


def test_fallback_roast_names_the_project():
    assert '"ghost"' in fallback_roast("ghost")
