import os
import sqlite3
import time
from contextlib import closing

from campus_scheduler.database_operations import (retrieve_section_info, build_course_requests,
                                                  retrieve_buildings)
from campus_scheduler.models import Preferences
from campus_scheduler.scheduling_logic import generate
from campus_scheduler.plotting import plot_schedules
from campus_scheduler.utils import (logger, print_summary, print_execution_summary, print_error_summary,
                                    CourseNotFoundError, SearchSpaceTooLargeError)
from mockup.mockup import mock_selected_courses, mock_term, mock_preferences

DB_PATH = os.path.join('assets', 'schedule.db')


def main():
    # Start timing (time decorator function does not seem to work with main)
    start_time = time.time()

    try:
        with closing(sqlite3.connect(DB_PATH)) as conn:
            cursor = conn.cursor()

            # Mock user input (get it from mockup file)
            selected_courses = mock_selected_courses()
            term, year = mock_term()
            preferences = Preferences.from_dict(mock_preferences())

            section_cache = {}

            # All catalog and building data is fetched before the search starts
            df = retrieve_section_info(cursor, course_codes=selected_courses, term=term, year=year,
                                       section_cache=section_cache)
            course_requests = build_course_requests(df, selected_courses)
            buildings = retrieve_buildings(cursor)
            logger.info("Section and building info retrieved successfully")

        candidates = generate(course_requests, preferences, buildings)

        print_summary(candidates)
        if candidates:
            plot_schedules(candidates)

    except CourseNotFoundError as e:
        logger.error(f"No schedules found: {e}")
    except SearchSpaceTooLargeError as e:
        logger.error(f"Too many combinations, select fewer courses: {e}")
    except Exception as e:
        logger.error(f"Error in main execution: {e}")

    end_time = time.time()  # End timing
    main_execution_time = end_time - start_time
    print(f"Main execution time: {main_execution_time:.4f} seconds")  # Print main execution time

    print_execution_summary()
    print_error_summary()

if __name__ == '__main__':
    main()
