from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from campus_scheduler.config import config
from campus_scheduler.utils import (DAYS_OF_WEEK, ConfigurationError, InvalidMeetingTimeError,
                                    is_valid_time, time_to_minutes)


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True)
class Building:
    building_number: str
    building_name: str
    coordinates: Coordinate
    address: str = ""
    description: str = ""
    departments: Tuple[str, ...] = ()
    facilities: Tuple[str, ...] = ()
    is_active: bool = True


@dataclass(frozen=True)
class MeetingTime:
    day: str           # 'Sunday' .. 'Thursday'
    start_time: str    # 'HH:MM', 24-hour clock
    end_time: str

    def __post_init__(self):
        if self.day not in DAYS_OF_WEEK:
            raise InvalidMeetingTimeError(f"Invalid meeting day: {self.day!r}")
        for value in (self.start_time, self.end_time):
            if not is_valid_time(value):
                raise InvalidMeetingTimeError(f"Invalid meeting time: {value!r}")
        if self.start_minutes >= self.end_minutes:
            raise InvalidMeetingTimeError(
                f"Meeting on {self.day} starts at {self.start_time} but ends at {self.end_time}"
            )

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)

    @property
    def start_hour(self) -> int:
        return int(self.start_time.split(':')[0])

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MeetingTime:
        return cls(day=data["day"], start_time=data["startTime"], end_time=data["endTime"])

    def to_dict(self) -> Dict[str, str]:
        return {"day": self.day, "startTime": self.start_time, "endTime": self.end_time}


@dataclass(frozen=True)
class Section:
    course_code: str
    course_name: str
    credits: int
    crn: str
    section_number: str
    instructor: str
    capacity: int
    enrolled: int
    meetings: Tuple[MeetingTime, ...]
    building: str
    room: str
    is_online: bool = False
    notes: Optional[str] = None

    @property
    def is_eligible(self) -> bool:
        """A section can be scheduled if it has open seats and meets in person."""
        return self.enrolled < self.capacity and not self.is_online

    def to_dict(self) -> Dict[str, Any]:
        return {
            "courseCode": self.course_code,
            "courseName": self.course_name,
            "crn": self.crn,
            "sectionNumber": self.section_number,
            "instructor": self.instructor,
            "building": self.building,
            "room": self.room,
            "timeSlots": [meeting.to_dict() for meeting in self.meetings],
            "credits": self.credits,
        }


@dataclass(frozen=True)
class CourseRequest:
    course_code: str
    course_name: str
    credits: int
    sections: Tuple[Section, ...] = ()
    department: str = ""

    def eligible_sections(self) -> List[Section]:
        """Sections with open seats that meet in person, in catalog order."""
        return [section for section in self.sections if section.is_eligible]


def _default_preferences() -> Dict[str, Any]:
    try:
        return config["default_preferences"]
    except KeyError:
        raise ConfigurationError("Missing critical configuration: 'default_preferences'")


@dataclass(frozen=True)
class Preferences:
    preferred_professors: FrozenSet[str] = frozenset()
    avoid_early_classes: bool = False
    max_walking_distance: int = 15  # In minutes
    preferred_buildings: FrozenSet[str] = frozenset()
    avoid_buildings: FrozenSet[str] = frozenset()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> Preferences:
        """
        Build preferences from a stored record (camelCase keys), defaulting absent fields
        from config["default_preferences"].
        """
        data = data or {}
        defaults = _default_preferences()

        def pick(key, default_key):
            value = data.get(key)
            return defaults[default_key] if value is None else value

        return cls(
            preferred_professors=frozenset(pick("preferredProfessors", "preferred_professors")),
            avoid_early_classes=bool(pick("avoidEarlyClasses", "avoid_early_classes")),
            max_walking_distance=int(pick("maxWalkingDistance", "max_walking_distance")),
            preferred_buildings=frozenset(pick("preferredBuildings", "preferred_buildings")),
            avoid_buildings=frozenset(pick("avoidBuildings", "avoid_buildings")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "preferredProfessors": sorted(self.preferred_professors),
            "avoidEarlyClasses": self.avoid_early_classes,
            "maxWalkingDistance": self.max_walking_distance,
            "preferredBuildings": sorted(self.preferred_buildings),
            "avoidBuildings": sorted(self.avoid_buildings),
        }


@dataclass(frozen=True)
class ScheduleCandidate:
    sections: Tuple[Section, ...]
    total_credits: int
    total_walking_time: int  # In minutes
    score: float
    preferences: Preferences = field(default_factory=Preferences)

    @property
    def course_codes(self) -> List[str]:
        return [section.course_code for section in self.sections]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "courses": [section.to_dict() for section in self.sections],
            "totalCredits": self.total_credits,
            "totalWalkingTime": self.total_walking_time,
            "score": self.score,
            "preferences": self.preferences.to_dict(),
        }


def make_section(course_code: str, course_name: str, credits: int, crn: str,
                 meetings: Iterable[Dict[str, Any]], building: str, **kwargs) -> Section:
    """
    Convenience constructor taking meeting times in catalog format
    ({"day": ..., "startTime": ..., "endTime": ...}).
    """
    return Section(
        course_code=course_code,
        course_name=course_name,
        credits=credits,
        crn=crn,
        section_number=kwargs.get("section_number", "001"),
        instructor=kwargs.get("instructor", "Staff"),
        capacity=kwargs.get("capacity", 30),
        enrolled=kwargs.get("enrolled", 0),
        meetings=tuple(MeetingTime.from_dict(meeting) for meeting in meetings),
        building=building,
        room=kwargs.get("room", ""),
        is_online=kwargs.get("is_online", False),
        notes=kwargs.get("notes"),
    )
