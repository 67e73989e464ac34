import sqlite3

import pytest

from assets.generate_db import SAMPLE_BUILDINGS, SAMPLE_COURSES, build_buildings_df, build_sections_df
from campus_scheduler.database_operations import import_catalog
from campus_scheduler.models import Coordinate, make_section
from campus_scheduler.utils import errors


@pytest.fixture(autouse=True) # Execute this automatically in every test
def clear_errors():
    errors.clear()  # Clear errors before each test
    yield
    errors.clear()  # Clear errors after each test


@pytest.fixture
def building_lookup():
    return {
        "63": Coordinate(lat=26.3111, lng=50.2094),
        "24": Coordinate(lat=26.3130, lng=50.2070),
        "76": Coordinate(lat=26.3140, lng=50.2060),
    }


@pytest.fixture
def section_a():
    """Course A, Sunday/Tuesday 08:00-09:15 in building 63."""
    return make_section("ICS 101", "Introduction to Computer Science", 3, "10001",
                        [{"day": "Sunday", "startTime": "08:00", "endTime": "09:15"},
                         {"day": "Tuesday", "startTime": "08:00", "endTime": "09:15"}],
                        "63", instructor="Dr. Ahmed Al-Shehri", room="101")


@pytest.fixture
def section_b():
    """Course B, same times as course A, in building 24."""
    return make_section("MATH 101", "Calculus I", 4, "20001",
                        [{"day": "Sunday", "startTime": "08:00", "endTime": "09:15"},
                         {"day": "Tuesday", "startTime": "08:00", "endTime": "09:15"}],
                        "24", instructor="Dr. Mohammed Al-Rashid", room="201")


@pytest.fixture
def db_connection():
    conn = sqlite3.connect(':memory:')  # Sample catalog, same data as assets/schedule.db
    import_catalog(conn, build_buildings_df(SAMPLE_BUILDINGS), build_sections_df(SAMPLE_COURSES))
    yield conn
    conn.close()
