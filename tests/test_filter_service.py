from __future__ import annotations

from datetime import datetime, timedelta, timezone

from conftest import NOW, make_movie

from core.models import FilterCriteria, RelationAxis, TimeWindow
from core.services.filter_service import filter_records, local_now, matches, matches_relation, window_start


def ids(records):
    return [r.id for r in records]


def test_empty_criteria_pass_everything(movies):
    assert ids(filter_records(movies, FilterCriteria(), NOW)) == ["m1", "m2", "m3", "m4", "m5"]


def test_search_is_case_insensitive_substring(movies):
    assert ids(filter_records(movies, FilterCriteria(search_text="MACH"), NOW)) == ["m5"]
    assert ids(filter_records(movies, FilterCriteria(search_text="er"), NOW)) == ["m2", "m3"]


def test_search_treats_regex_characters_literally():
    rec = make_movie("x", "Se7en (1995)")
    assert matches(rec, FilterCriteria(search_text="(1995)"), NOW)
    assert not matches(rec, FilterCriteria(search_text="S.7en"), NOW)


def test_relation_filter_matches_any_of_record_ids(movies):
    crit = FilterCriteria(channel_3d_ids=frozenset({"c3b"}))
    assert ids(filter_records(movies, crit, NOW)) == ["m2", "m4"]


def test_record_without_relations_never_matches_non_empty_filter():
    rec = make_movie("x")
    assert not matches_relation(rec, RelationAxis.CHANNEL_3D, frozenset({"c3a"}))
    assert matches_relation(rec, RelationAxis.CHANNEL_3D, frozenset())


def test_relation_axes_are_independent(movies):
    crit = FilterCriteria(channel_3d_ids=frozenset({"c3a"}), channel_2d_ids=frozenset({"c2a"}))
    assert ids(filter_records(movies, crit, NOW)) == ["m1"]


def test_status_membership(movies):
    crit = FilterCriteria(statuses=frozenset({"Done", "Playlist"}))
    assert ids(filter_records(movies, crit, NOW)) == ["m1", "m3"]


def test_time_windows(movies):
    def run(window):
        return ids(filter_records(movies, FilterCriteria(time_window=window), NOW))

    assert run(TimeWindow.TODAY) == ["m4"]
    assert run(TimeWindow.LAST_7_DAYS) == ["m3", "m4"]
    assert run(TimeWindow.LAST_30_DAYS) == ["m2", "m3", "m4", "m5"]


def test_today_starts_at_midnight_of_now():
    now = datetime(2026, 10, 19, 0, 5, tzinfo=timezone.utc)
    assert window_start(TimeWindow.TODAY, now) == datetime(2026, 10, 19, tzinfo=timezone.utc)


def test_time_window_uses_evaluation_instant():
    rec = make_movie("x", days_ago=0.5)  # 03:30 on NOW's day
    crit = FilterCriteria(time_window=TimeWindow.TODAY)
    assert matches(rec, crit, NOW)
    next_day = datetime(2026, 10, 20, 9, 0, tzinfo=timezone.utc)
    assert not matches(rec, crit, next_day)


def test_conjunction_never_exceeds_either_criterion(movies):
    a = FilterCriteria(search_text="e")
    b = FilterCriteria(time_window=TimeWindow.LAST_30_DAYS)
    both = FilterCriteria(search_text="e", time_window=TimeWindow.LAST_30_DAYS)
    count = len(filter_records(movies, both, NOW))
    assert count <= min(len(filter_records(movies, a, NOW)), len(filter_records(movies, b, NOW)))


def test_today_follows_local_calendar_day():
    pacific = timezone(timedelta(hours=-7))
    now = datetime(2026, 10, 19, 20, 0, tzinfo=pacific)  # 03:00 UTC on the 20th
    morning = make_movie("x")
    morning.added_at = datetime(2026, 10, 19, 9, 0, tzinfo=pacific)
    assert window_start(TimeWindow.TODAY, now) == datetime(2026, 10, 19, tzinfo=pacific)
    assert matches(morning, FilterCriteria(time_window=TimeWindow.TODAY), now)


def test_default_clock_is_local_and_aware():
    now = local_now()
    assert now.tzinfo is not None
    assert now.utcoffset() == datetime.now().astimezone().utcoffset()
