import pytest

from campus_scheduler.config import config
from campus_scheduler.models import Building, Coordinate, Preferences, ScheduleCandidate, make_section
from campus_scheduler.scoring import (_group_and_sort_meetings_by_day, _walking_time_by_day,
                                      _score_early_classes, total_walking_time, score_schedule,
                                      build_candidate, rank_candidates)
from campus_scheduler.utils import ConfigurationError


def _section(crn, building, slots, instructor="Staff", credits=3, course_code=None):
    return make_section(course_code or f"CRS {crn}", "Course", credits, crn,
                        [{"day": day, "startTime": start, "endTime": end} for day, start, end in slots],
                        building, instructor=instructor)


"""Testing _group_and_sort_meetings_by_day function."""
def test_group_and_sort_meetings_by_day():
    """Meetings are grouped per day and sorted by start time, whatever the section order."""
    late = _section("1", "63", [("Monday", "12:00", "12:50"), ("Wednesday", "12:00", "12:50")])
    early = _section("2", "24", [("Monday", "08:00", "08:50")])
    day_map = _group_and_sort_meetings_by_day([late, early])
    assert [meeting["CRN"] for meeting in day_map["Monday"]] == ["2", "1"]
    assert [meeting["CRN"] for meeting in day_map["Wednesday"]] == ["1"]
    assert day_map["Sunday"] == [], "Days without meetings should be empty"

def test_group_and_sort_meetings_stable_ties():
    """Meetings starting at the same time keep their section order."""
    first = _section("1", "63", [("Monday", "08:00", "08:50")])
    second = _section("2", "24", [("Monday", "08:00", "09:50")])
    day_map = _group_and_sort_meetings_by_day([first, second])
    assert [meeting["CRN"] for meeting in day_map["Monday"]] == ["1", "2"]


"""Testing walking time aggregation."""
def test_walking_time_single_section(building_lookup):
    """A single section never requires walking, even meeting on several days."""
    section = _section("1", "63", [("Sunday", "08:00", "09:15"), ("Tuesday", "08:00", "09:15")])
    assert total_walking_time([section], building_lookup) == 0

def test_walking_time_same_building(building_lookup):
    """Back-to-back classes in the same building require no walking."""
    sections = [
        _section("1", "63", [("Monday", "08:00", "08:50")]),
        _section("2", "63", [("Monday", "09:00", "09:50")]),
    ]
    assert total_walking_time(sections, building_lookup) == 0

def test_walking_time_between_buildings(building_lookup):
    """Each transition between buildings 63 and 24 takes 6 minutes, summed over the day."""
    sections = [
        _section("1", "63", [("Monday", "12:00", "12:50")]),
        _section("2", "24", [("Monday", "10:00", "10:50")]),
        _section("3", "63", [("Monday", "08:00", "08:50")]),
    ]
    # 63 -> 24 -> 63
    assert total_walking_time(sections, building_lookup) == 12

def test_walking_time_summed_across_days(building_lookup):
    """Transitions on different days add up."""
    sections = [
        _section("1", "63", [("Sunday", "08:00", "09:15"), ("Tuesday", "08:00", "09:15")]),
        _section("2", "24", [("Sunday", "09:30", "10:45"), ("Tuesday", "09:30", "10:45"),
                             ("Thursday", "09:30", "10:45")]),
    ]
    assert total_walking_time(sections, building_lookup) == 12

def test_walking_time_unknown_building(building_lookup):
    """Transitions involving a building without coordinates contribute nothing."""
    sections = [
        _section("1", "63", [("Monday", "08:00", "08:50")]),
        _section("2", "99", [("Monday", "09:00", "09:50")]),
        _section("3", "24", [("Monday", "10:00", "10:50")]),
    ]
    assert total_walking_time(sections, building_lookup) == 0

def test_walking_time_by_day_accepts_buildings():
    """The building lookup may hold Building records instead of bare coordinates."""
    lookup = {
        "63": Building("63", "College of Computer Sciences and Engineering", Coordinate(26.3111, 50.2094)),
        "24": Building("24", "College of Sciences", Coordinate(26.3130, 50.2070)),
    }
    day_meetings = [{"CRN": "1", "Building": "63", "STime": 480, "ETime": 530},
                    {"CRN": "2", "Building": "24", "STime": 540, "ETime": 590}]
    assert _walking_time_by_day(day_meetings, lookup) == 6


"""Testing score_schedule function."""
def test_score_no_preferences():
    """A schedule without walking or matching preferences keeps the base score."""
    section = _section("1", "63", [("Monday", "10:00", "10:50")])
    assert score_schedule([section], Preferences(), 0) == 100.0

def test_score_walking_penalty():
    """Every minute of walking costs half a point."""
    section = _section("1", "63", [("Monday", "10:00", "10:50")])
    assert score_schedule([section], Preferences(), 10) == 95.0

def test_score_excess_walking_penalty():
    """Walking beyond the preferred maximum costs two more points per minute."""
    section = _section("1", "63", [("Monday", "10:00", "10:50")])
    # 100 - 0.5 * 20 - 2 * (20 - 15)
    assert score_schedule([section], Preferences(max_walking_distance=15), 20) == 80.0

def test_score_preferred_professor_and_buildings():
    """Preferred professors and buildings add points, avoided buildings subtract."""
    sections = [
        _section("1", "63", [("Monday", "10:00", "10:50")], instructor="Dr. John Smith"),
        _section("2", "24", [("Monday", "11:00", "11:50")], instructor="Dr. John Smith"),
        _section("3", "76", [("Monday", "12:00", "12:50")]),
    ]
    preferences = Preferences(preferred_professors=frozenset({"Dr. John Smith"}),
                              preferred_buildings=frozenset({"63"}),
                              avoid_buildings=frozenset({"76"}))
    # 100 + 2 * 10 + 5 - 15
    assert score_schedule(sections, preferences, 0) == 110.0

def test_score_early_classes_counted_per_meeting():
    """A course meeting three early mornings a week costs exactly 15 points."""
    early = _section("1", "63", [("Sunday", "08:00", "08:50"), ("Tuesday", "08:00", "08:50"),
                                 ("Thursday", "08:00", "08:50")])
    late = _section("1", "63", [("Sunday", "10:00", "10:50"), ("Tuesday", "10:00", "10:50"),
                                ("Thursday", "10:00", "10:50")])
    preferences = Preferences(avoid_early_classes=True)
    assert _score_early_classes([early], preferences) == 3
    assert score_schedule([late], preferences, 0) - score_schedule([early], preferences, 0) == 15.0

def test_score_early_classes_ignored_without_preference():
    """Early classes are not penalized unless the user avoids them."""
    early = _section("1", "63", [("Sunday", "08:00", "08:50")])
    assert score_schedule([early], Preferences(avoid_early_classes=False), 0) == 100.0

def test_score_nine_am_is_not_early():
    """A class starting at 09:00 is not an early class."""
    section = _section("1", "63", [("Sunday", "09:00", "09:50")])
    assert score_schedule([section], Preferences(avoid_early_classes=True), 0) == 100.0

def test_score_never_negative():
    """The score is clamped at zero."""
    section = _section("1", "63", [("Monday", "10:00", "10:50")])
    assert score_schedule([section], Preferences(max_walking_distance=0), 200) == 0.0

def test_score_deterministic():
    """Scoring the same schedule twice gives identical results."""
    sections = [_section("1", "63", [("Monday", "08:00", "08:50")], instructor="Dr. John Smith")]
    preferences = Preferences(avoid_early_classes=True, preferred_professors=frozenset({"Dr. John Smith"}))
    assert score_schedule(sections, preferences, 7) == score_schedule(sections, preferences, 7)

def test_score_missing_weight(monkeypatch):
    """Missing weights raise ConfigurationError."""
    monkeypatch.setitem(config, "weights", {"base_score": 100})
    with pytest.raises(ConfigurationError, match="walking_time"):
        score_schedule([], Preferences(), 0)


"""Testing build_candidate function."""
def test_build_candidate(building_lookup):
    """A candidate carries total credits, walking time and score of its sections."""
    sections = [
        _section("1", "63", [("Monday", "08:00", "08:50")], credits=3),
        _section("2", "24", [("Monday", "09:00", "09:50")], credits=4),
    ]
    candidate = build_candidate(sections, Preferences(), building_lookup)
    assert candidate.total_credits == 7
    assert candidate.total_walking_time == 6
    assert candidate.score == 97.0
    assert candidate.preferences == Preferences()

def test_build_candidate_copies_sections(building_lookup):
    """Later changes to the partial schedule do not affect a materialized candidate."""
    partial = [_section("1", "63", [("Monday", "08:00", "08:50")])]
    candidate = build_candidate(partial, Preferences(), building_lookup)
    partial.pop()
    assert len(candidate.sections) == 1


"""Testing rank_candidates function."""
def _candidate(score, crn="1"):
    return ScheduleCandidate(sections=(_section(crn, "63", [("Monday", "08:00", "08:50")]),),
                             total_credits=3, total_walking_time=0, score=score)

def test_rank_candidates_order():
    """Candidates are sorted by score, best first."""
    ranked = rank_candidates([_candidate(50.0), _candidate(90.0), _candidate(70.0)])
    assert [candidate.score for candidate in ranked] == [90.0, 70.0, 50.0]

def test_rank_candidates_stable_ties():
    """Candidates with equal scores keep discovery order."""
    ranked = rank_candidates([_candidate(80.0, "1"), _candidate(90.0, "2"), _candidate(80.0, "3")])
    assert [candidate.sections[0].crn for candidate in ranked] == ["2", "1", "3"]

def test_rank_candidates_default_cap():
    """At most ten candidates are returned by default."""
    ranked = rank_candidates([_candidate(float(score)) for score in range(25)])
    assert len(ranked) == 10
    assert ranked[0].score == 24.0 and ranked[-1].score == 15.0

def test_rank_candidates_explicit_cap():
    """The cap can be set per call."""
    assert len(rank_candidates([_candidate(float(score)) for score in range(5)], max_schedules=3)) == 3

def test_rank_candidates_configured_cap(monkeypatch):
    """The default cap comes from config."""
    monkeypatch.setitem(config, "max_schedules", 2)
    assert len(rank_candidates([_candidate(float(score)) for score in range(5)])) == 2

def test_rank_candidates_empty():
    """No candidates rank to an empty list."""
    assert rank_candidates([]) == []
