"""
When adding a new scoring function, remember to add it to score_schedule in this module
and its weight to config["weights"].
"""
from typing import Any, Dict, List, Mapping, Optional, Sequence

from campus_scheduler.config import config
from campus_scheduler import utils
from campus_scheduler.geo import walking_time
from campus_scheduler.models import Building, Coordinate, Preferences, ScheduleCandidate, Section
from campus_scheduler.utils import DAYS_OF_WEEK, ConfigurationError


def _weight(key: str) -> float:
    try:
        return config["weights"][key]
    except KeyError:
        raise ConfigurationError(f"Missing critical configuration: 'weights.{key}'")


def _resolve_coordinate(building_lookup: Mapping[str, Any], building_id: str) -> Optional[Coordinate]:
    """
    Look up a building's coordinates. The lookup may map identifiers to Building or to Coordinate.
    (Helper function of _walking_time_by_day.)
    """
    entry = building_lookup.get(building_id)
    if isinstance(entry, Building):
        return entry.coordinates
    return entry


def _group_and_sort_meetings_by_day(sections: Sequence[Section]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Group every meeting of every section by day and then sort them by start time in ascending order.
    The sort is stable: meetings starting at the same time keep their section order.

    Args:
        sections (Sequence[Section]): The sections of a schedule.

    Returns:
        Dict[str, List[Dict[str, Any]]]: A dictionary where keys are days of the week
        and values are lists of meetings for that day, sorted by start time.
    """
    day_meetings_map = {day: [] for day in DAYS_OF_WEEK}

    for section in sections:
        for meeting in section.meetings:
            day_meetings_map[meeting.day].append({
                "CRN": section.crn,
                "Building": section.building,
                "STime": meeting.start_minutes,
                "ETime": meeting.end_minutes,
            })

    for day_meetings in day_meetings_map.values():
        day_meetings.sort(key=lambda meeting: meeting["STime"])

    return day_meetings_map


def _walking_time_by_day(day_meetings: List[Dict[str, Any]], building_lookup: Mapping[str, Any]) -> int:
    """
    Sum walking time between consecutive meetings of one day.

    Args:
        day_meetings (List[Dict[str, Any]]): Meetings of the day, sorted by start time.
        building_lookup (Mapping[str, Any]): Building identifier to Building or Coordinate.

    Returns:
        int: Walking minutes for the day.
    """
    day_walking_time = 0

    for i in range(1, len(day_meetings)):
        prev_building = day_meetings[i - 1]["Building"]
        curr_building = day_meetings[i]["Building"]

        # Staying in the same building takes no walking
        if prev_building == curr_building:
            continue

        prev_coordinate = _resolve_coordinate(building_lookup, prev_building)
        curr_coordinate = _resolve_coordinate(building_lookup, curr_building)
        # Skip transitions with unknown building locations
        if prev_coordinate is None or curr_coordinate is None:
            continue

        day_walking_time += walking_time(prev_coordinate, curr_coordinate)

    return day_walking_time


def total_walking_time(sections: Sequence[Section], building_lookup: Mapping[str, Any]) -> int:
    """
    Total walking time between back-to-back meetings, across all days of the week.

    Args:
        sections (Sequence[Section]): The sections of a schedule.
        building_lookup (Mapping[str, Any]): Building identifier to Building or Coordinate.

    Returns:
        int: The total walking time in minutes.
    """
    day_meetings_map = _group_and_sort_meetings_by_day(sections)
    return sum(
        _walking_time_by_day(day_meetings, building_lookup)
        for day_meetings in day_meetings_map.values()
    )


def _score_preferred_professors(sections: Sequence[Section], preferences: Preferences) -> int:
    """Count sections taught by a preferred professor."""
    return sum(1 for section in sections if section.instructor in preferences.preferred_professors)


def _score_early_classes(sections: Sequence[Section], preferences: Preferences) -> int:
    """
    Count meetings starting before the early class hour, if the user avoids early classes.
    Each weekly meeting counts separately: a course meeting three mornings a week counts three times.
    """
    if not preferences.avoid_early_classes:
        return 0
    early_class_hour = _weight("early_class_hour")
    return sum(
        1
        for section in sections
        for meeting in section.meetings
        if meeting.start_hour < early_class_hour
    )


def _score_buildings(sections: Sequence[Section], buildings: Any) -> int:
    """Count sections meeting in one of the given buildings."""
    return sum(1 for section in sections if section.building in buildings)


def _score_excess_walking(total_walking: int, preferences: Preferences) -> int:
    """Minutes of walking over the user's preferred maximum."""
    return max(0, total_walking - preferences.max_walking_distance)


@utils.time_function
def score_schedule(sections: Sequence[Section], preferences: Preferences, total_walking: int) -> float:
    """
    Score a complete schedule against the user's preferences. Higher is better, never negative.

    Args:
        sections (Sequence[Section]): The sections of a schedule.
        preferences (Preferences): The user's preferences.
        total_walking (int): Total walking time of the schedule, in minutes.

    Returns:
        float: The schedule score.
    """
    score = float(_weight("base_score"))
    score -= _weight("walking_time") * total_walking
    score += _weight("preferred_professor") * _score_preferred_professors(sections, preferences)
    score -= _weight("early_class") * _score_early_classes(sections, preferences)
    score -= _weight("avoided_building") * _score_buildings(sections, preferences.avoid_buildings)
    score += _weight("preferred_building") * _score_buildings(sections, preferences.preferred_buildings)
    score -= _weight("excess_walking") * _score_excess_walking(total_walking, preferences)
    # Add new scores and their weights here

    return max(0.0, score)


def build_candidate(sections: Sequence[Section],
                    preferences: Preferences,
                    building_lookup: Mapping[str, Any]
) -> ScheduleCandidate:
    """
    Materialize a scored candidate from a complete combination of sections.
    The sections are copied, so the caller may keep mutating its list.

    Args:
        sections (Sequence[Section]): The committed sections.
        preferences (Preferences): Preferences used for scoring.
        building_lookup (Mapping[str, Any]): Building identifier to Building or Coordinate.

    Returns:
        ScheduleCandidate: The scored candidate.
    """
    committed = tuple(sections)
    total_walking = total_walking_time(committed, building_lookup)
    return ScheduleCandidate(
        sections=committed,
        total_credits=sum(section.credits for section in committed),
        total_walking_time=total_walking,
        score=score_schedule(committed, preferences, total_walking),
        preferences=preferences,
    )


@utils.time_function
def rank_candidates(candidates: Sequence[ScheduleCandidate],
                    max_schedules: Optional[int] = None
) -> List[ScheduleCandidate]:
    """
    Sort candidates by score, best first, and keep the top ones.
    Candidates with equal scores keep their discovery order.

    Args:
        candidates (Sequence[ScheduleCandidate]): All candidates found by the search.
        max_schedules (int, optional): Number of candidates to keep. Defaults to config["max_schedules"].

    Returns:
        List[ScheduleCandidate]: The top candidates.
    """
    if max_schedules is None:
        try:
            max_schedules = config["max_schedules"]
        except KeyError:
            raise ConfigurationError("Missing critical configuration: 'max_schedules'")

    ranked = sorted(candidates, key=lambda candidate: candidate.score, reverse=True)
    return ranked[:max_schedules]
