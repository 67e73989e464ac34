from typing import Any, List, Mapping, Optional, Sequence

from campus_scheduler import config as settings
from campus_scheduler import utils
from campus_scheduler.models import CourseRequest, MeetingTime, Preferences, ScheduleCandidate, Section
from campus_scheduler.scoring import build_candidate, rank_candidates
from campus_scheduler.utils import ConfigurationError, SearchSpaceTooLargeError, logger


def check_time_conflict(meeting1: MeetingTime, meeting2: MeetingTime) -> bool:
    """
    Check if two meeting times overlap on the same day.
    (Helper function of has_conflict.)

    Intervals are half-open: a meeting ending at 09:50 does not conflict with one starting at 09:50.

    Args:
        meeting1 (MeetingTime): The first meeting time.
        meeting2 (MeetingTime): The second meeting time.

    Returns:
        bool: True if there is a time conflict, False otherwise.
    """
    if meeting1.day != meeting2.day:
        return False
    return (meeting1.start_minutes < meeting2.end_minutes and
            meeting2.start_minutes < meeting1.end_minutes)


@utils.time_function
def has_conflict(partial: Sequence[Section], candidate: Section) -> bool:
    """
    Checks whether a candidate section overlaps any section already in a partial schedule.
    A critical part of the scheduling engine.

    Args:
        partial (Sequence[Section]): Sections committed so far.
        candidate (Section): The section to be added.

    Returns:
        bool: True if any meeting of the candidate overlaps a committed meeting, False otherwise.
    """
    for section in partial:
        for existing in section.meetings:
            for new in candidate.meetings:
                if check_time_conflict(existing, new):
                    return True
    return False


def _setting(key):
    try:
        return settings.config[key]
    except KeyError:
        raise ConfigurationError(f"Missing critical configuration: '{key}'")


@utils.time_function
def generate_combinations(course_requests: Sequence[CourseRequest],
                          preferences: Preferences,
                          building_lookup: Mapping[str, Any],
                          allow_omission: Optional[bool] = None,
                          max_nodes: Optional[int] = None
) -> List[ScheduleCandidate]:
    """
    Enumerate every conflict-free combination of sections, one section per course or the course left out,
    and materialize a scored candidate for each. Candidates are returned in discovery order.

    Args:
        course_requests (Sequence[CourseRequest]): Requested courses, in search order.
        preferences (Preferences): Preferences used for scoring.
        building_lookup (Mapping[str, Any]): Building identifier to Building or Coordinate.
        allow_omission (bool, optional): Whether a course may be left out even when a section fits.
            Defaults to config.ALLOW_COURSE_OMISSION.
        max_nodes (int, optional): Hard cap on search nodes visited. Defaults to config["max_nodes"].

    Returns:
        List[ScheduleCandidate]: All non-empty candidates.

    Raises:
        SearchSpaceTooLargeError: If the search visits more nodes than the cap.
    """
    if allow_omission is None:
        allow_omission = settings.ALLOW_COURSE_OMISSION
    if max_nodes is None:
        max_nodes = _setting("max_nodes")

    # One request per course code; the first one wins
    requests_by_code = {}
    for request in course_requests:
        requests_by_code.setdefault(request.course_code, request)

    # Eligibility is resolved once, before the search starts
    options = [(request, request.eligible_sections()) for request in requests_by_code.values()]
    for request, sections in options:
        logger.info(f"{request.course_code}: {len(sections)} eligible of {len(request.sections)} sections")

    candidates: List[ScheduleCandidate] = []
    partial: List[Section] = []
    nodes_visited = 0

    def backtrack(course_index: int) -> None:
        nonlocal nodes_visited
        nodes_visited += 1
        if max_nodes is not None and nodes_visited > max_nodes:
            raise SearchSpaceTooLargeError(max_nodes, nodes_visited)

        if course_index == len(options):
            if partial:
                candidates.append(build_candidate(partial, preferences, building_lookup))
            return

        _, eligible = options[course_index]
        for section in eligible:
            if not has_conflict(partial, section):
                partial.append(section)
                backtrack(course_index + 1)
                partial.pop()

        # Leave this course out of the schedule
        if allow_omission or not eligible:
            backtrack(course_index + 1)

    backtrack(0)
    logger.info(f"Visited {nodes_visited} search nodes, produced {len(candidates)} schedule candidates")
    return candidates


def generate(course_requests: Sequence[CourseRequest],
             preferences: Preferences,
             building_lookup: Mapping[str, Any],
             max_schedules: Optional[int] = None,
             allow_omission: Optional[bool] = None,
             max_nodes: Optional[int] = None
) -> List[ScheduleCandidate]:
    """
    Generate the best schedules for the requested courses.
    Pure: reads its inputs only and persists nothing.

    Args:
        course_requests (Sequence[CourseRequest]): Requested courses with their sections.
        preferences (Preferences): The user's soft preferences.
        building_lookup (Mapping[str, Any]): Building identifier to Building or Coordinate.
        max_schedules (int, optional): Number of candidates to return. Defaults to config["max_schedules"].
        allow_omission (bool, optional): See generate_combinations.
        max_nodes (int, optional): See generate_combinations.

    Returns:
        List[ScheduleCandidate]: At most max_schedules candidates, best score first.
    """
    candidates = generate_combinations(course_requests, preferences, building_lookup,
                                       allow_omission=allow_omission, max_nodes=max_nodes)
    return rank_candidates(candidates, max_schedules)
