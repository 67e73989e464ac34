import json
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd

from campus_scheduler import utils
from campus_scheduler.models import (Building, Coordinate, CourseRequest, MeetingTime,
                                     ScheduleCandidate, Section)
from campus_scheduler.utils import CourseNotFoundError, logger

BUILDING_COLUMNS = ['Building_Number', 'Building_Name', 'Lat', 'Lng', 'Address', 'Description',
                    'Departments', 'Facilities', 'Is_Active']
SECTION_COLUMNS = ['Course_Code', 'Course_Name', 'Credits', 'Department', 'Term', 'Year', 'CRN',
                   'Section_Number', 'Instructor', 'Capacity', 'Enrolled', 'Day', 'STime', 'ETime',
                   'Building', 'Room', 'Is_Online', 'Notes', 'Is_Active']


def import_catalog(conn: sqlite3.Connection, buildings_df: pd.DataFrame, sections_df: pd.DataFrame) -> None:
    """
    Write buildings and course sections to the database, replacing existing tables.
    The schedule table holds one row per section meeting time.

    Args:
        conn (sqlite3.Connection): The database connection.
        buildings_df (pd.DataFrame): One row per building, BUILDING_COLUMNS.
        sections_df (pd.DataFrame): One row per section meeting time, SECTION_COLUMNS.
    """
    buildings_df[BUILDING_COLUMNS].to_sql('buildings', conn, if_exists='replace', index=False)
    sections_df[SECTION_COLUMNS].to_sql('schedule', conn, if_exists='replace', index=False)

    cursor = conn.cursor()
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_course_code ON schedule (Course_Code, Term, Year)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_crn ON schedule (CRN)")
    cursor.execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_building_number ON buildings (Building_Number)")
    conn.commit()
    logger.info(f"Imported {len(buildings_df)} buildings and {len(sections_df)} section meetings")


@utils.time_function
def retrieve_section_info(cursor: Any,
                          course_codes: List[str],
                          term: str,
                          year: int,
                          section_cache: Dict[Tuple[str, str, int], List[Any]]
) -> pd.DataFrame:
    """
    Retrieve section meeting rows from the database for the given courses, in catalog order.

    Args:
        cursor (sqlite3.Cursor): The database cursor to execute SQL queries.
        course_codes (list): Course codes to retrieve sections for.
        term (str): The term, e.g. 'Fall'.
        year (int): The year.
        section_cache (dict): A cache dictionary to store previously retrieved rows.

    Returns:
        pd.DataFrame: One row per section meeting time, SECTION_COLUMNS.

    Raises:
        CourseNotFoundError: If none of the courses are offered in the term.
    """
    # Each course is retrieved once, even if requested twice
    course_codes = list(dict.fromkeys(course_codes))
    data = []

    for course_code in course_codes:
        key = (course_code, term, year)
        if key in section_cache:
            data.extend(section_cache[key])
            continue
        try:
            cursor.execute(f"""
                SELECT {', '.join(SECTION_COLUMNS)}
                FROM schedule
                WHERE Course_Code = ? AND Term = ? AND Year = ? AND Is_Active = 1
                ORDER BY rowid
            """, (course_code, term, year))
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            utils.record_error('retrieve_section_info', f"{e} in course {course_code}")
            logger.error(f"Error retrieving sections for {course_code}: {e}")
            continue

        logger.info(f"Retrieved {len(rows)} section meetings for {course_code}")
        section_cache[key] = rows  # Cache the retrieved rows
        data.extend(rows)

    if not data:
        raise CourseNotFoundError(f"No courses found for {', '.join(course_codes)} in {term} {year}")

    return pd.DataFrame(data, columns=SECTION_COLUMNS)


def _split_list(value: Any) -> Tuple[str, ...]:
    if value is None or pd.isna(value) or not str(value).strip():
        return ()
    return tuple(item.strip() for item in str(value).split(','))


def _optional_text(value: Any) -> Any:
    return None if value is None or pd.isna(value) else str(value)


def build_course_requests(df: pd.DataFrame, course_codes: Sequence[str]) -> List[CourseRequest]:
    """
    Turn section meeting rows into course requests, one per requested course present in the data.
    Courses keep the requested order; sections and their meetings keep catalog order.

    Args:
        df (pd.DataFrame): Rows returned by retrieve_section_info.
        course_codes (Sequence[str]): The requested course codes.

    Returns:
        List[CourseRequest]: The resolved course requests.
    """
    requests = []

    for course_code in dict.fromkeys(course_codes):
        course_df = df[df['Course_Code'] == course_code]
        if course_df.empty:
            logger.warning(f"Course {course_code} not found in catalog, skipping")
            continue

        sections = []
        for crn, section_df in course_df.groupby('CRN', sort=False):
            first = section_df.iloc[0]
            meetings = tuple(
                MeetingTime(day=row['Day'], start_time=row['STime'], end_time=row['ETime'])
                for _, row in section_df.iterrows()
            )
            sections.append(Section(
                course_code=course_code,
                course_name=first['Course_Name'],
                credits=int(first['Credits']),
                crn=str(crn),
                section_number=str(first['Section_Number']),
                instructor=first['Instructor'],
                capacity=int(first['Capacity']),
                enrolled=int(first['Enrolled']),
                meetings=meetings,
                building=str(first['Building']),
                room=str(first['Room']),
                is_online=bool(first['Is_Online']),
                notes=_optional_text(first['Notes']),
            ))

        first = course_df.iloc[0]
        requests.append(CourseRequest(
            course_code=course_code,
            course_name=first['Course_Name'],
            credits=int(first['Credits']),
            sections=tuple(sections),
            department=first['Department'],
        ))

    return requests


@utils.time_function
def retrieve_buildings(cursor: Any) -> Dict[str, Building]:
    """
    Retrieve active buildings keyed by building number.

    Args:
        cursor (sqlite3.Cursor): The database cursor to execute SQL queries.

    Returns:
        Dict[str, Building]: Buildings keyed by building number.
    """
    cursor.execute(f"SELECT {', '.join(BUILDING_COLUMNS)} FROM buildings WHERE Is_Active = 1")
    df = pd.DataFrame(cursor.fetchall(), columns=BUILDING_COLUMNS)

    buildings = {}
    for _, row in df.iterrows():
        number = str(row['Building_Number'])
        buildings[number] = Building(
            building_number=number,
            building_name=row['Building_Name'],
            coordinates=Coordinate(lat=float(row['Lat']), lng=float(row['Lng'])),
            address=_optional_text(row['Address']) or "",
            description=_optional_text(row['Description']) or "",
            departments=_split_list(row['Departments']),
            facilities=_split_list(row['Facilities']),
            is_active=bool(row['Is_Active']),
        )
    logger.info(f"Retrieved {len(buildings)} buildings")
    return buildings


def _create_saved_schedules_table(conn: sqlite3.Connection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS saved_schedules (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            term TEXT NOT NULL,
            year INTEGER NOT NULL,
            courses TEXT NOT NULL,
            total_credits INTEGER NOT NULL,
            total_walking_time INTEGER NOT NULL,
            score REAL NOT NULL,
            preferences TEXT NOT NULL,
            created_at TEXT NOT NULL
        )
    """)


def save_schedule(conn: sqlite3.Connection,
                  candidate: ScheduleCandidate,
                  name: str,
                  term: str,
                  year: int,
                  user_id: str
) -> int:
    """
    Store a chosen schedule candidate for a user.

    Returns:
        int: The id of the saved schedule.
    """
    _create_saved_schedules_table(conn)
    record = candidate.to_dict()
    cursor = conn.execute("""
        INSERT INTO saved_schedules (user_id, name, term, year, courses, total_credits,
                                     total_walking_time, score, preferences, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """, (
        user_id, name.strip(), term, year,
        json.dumps(record["courses"]),
        record["totalCredits"],
        record["totalWalkingTime"],
        record["score"],
        json.dumps(record["preferences"]),
        datetime.now().isoformat(timespec='seconds'),
    ))
    conn.commit()
    logger.info(f"Saved schedule '{name}' for user {user_id}")
    return cursor.lastrowid


def retrieve_saved_schedules(cursor: Any, user_id: str) -> List[Dict[str, Any]]:
    """
    Retrieve a user's saved schedules, newest first, as stored.

    Args:
        cursor (sqlite3.Cursor): The database cursor to execute SQL queries.
        user_id (str): The user identifier.

    Returns:
        List[Dict[str, Any]]: Saved schedule records.
    """
    _create_saved_schedules_table(cursor.connection)
    cursor.execute("""
        SELECT id, name, term, year, courses, total_credits, total_walking_time, score, preferences, created_at
        FROM saved_schedules
        WHERE user_id = ?
        ORDER BY id DESC
    """, (user_id,))

    schedules = []
    for row in cursor.fetchall():
        schedules.append({
            "id": row[0],
            "name": row[1],
            "term": row[2],
            "year": row[3],
            "courses": json.loads(row[4]),
            "totalCredits": row[5],
            "totalWalkingTime": row[6],
            "score": row[7],
            "preferences": json.loads(row[8]),
            "createdAt": row[9],
        })
    return schedules
