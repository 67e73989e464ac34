import logging
import os
import sqlite3
import sys

import pandas as pd

# Allow running as a script from the assets folder
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from campus_scheduler.database_operations import import_catalog

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

SAMPLE_BUILDINGS = [
    {'number': '63', 'name': 'College of Computer Sciences and Engineering', 'lat': 26.3111, 'lng': 50.2094,
     'departments': ['Computer Science', 'Computer Engineering', 'Software Engineering'],
     'facilities': ['Computer Labs', 'Research Labs', 'Faculty Offices']},
    {'number': '59', 'name': 'College of Engineering Sciences', 'lat': 26.3120, 'lng': 50.2080,
     'departments': ['Mechanical Engineering', 'Electrical Engineering', 'Chemical Engineering'],
     'facilities': ['Engineering Labs', 'Workshops', 'Faculty Offices']},
    {'number': '24', 'name': 'College of Sciences', 'lat': 26.3130, 'lng': 50.2070,
     'departments': ['Mathematics', 'Physics', 'Chemistry'],
     'facilities': ['Science Labs', 'Research Centers', 'Faculty Offices']},
    {'number': '76', 'name': 'College of Business Administration', 'lat': 26.3140, 'lng': 50.2060,
     'departments': ['Business Administration', 'Accounting', 'Finance'],
     'facilities': ['Business Labs', 'Conference Rooms', 'Faculty Offices']},
    {'number': '13', 'name': 'Main Library', 'lat': 26.3150, 'lng': 50.2050,
     'departments': ['Library Services'],
     'facilities': ['Study Rooms', 'Computer Stations', 'Printing Services']},
    {'number': '50', 'name': 'Student Center', 'lat': 26.3160, 'lng': 50.2040,
     'departments': ['Student Affairs'],
     'facilities': ['Cafeteria', 'Meeting Rooms', 'Student Services']},
]

SAMPLE_COURSES = [
    {'code': 'ICS 101', 'name': 'Introduction to Computer Science', 'credits': 3, 'dept': 'Computer Science',
     'sections': [
         {'crn': '10001', 'number': '001', 'instructor': 'Dr. Ahmed Al-Shehri', 'capacity': 30, 'enrolled': 25,
          'slots': [('Sunday', '08:00', '09:15'), ('Tuesday', '08:00', '09:15')],
          'building': '63', 'room': '101'},
         {'crn': '10002', 'number': '002', 'instructor': 'Dr. Sarah Al-Zahrani', 'capacity': 30, 'enrolled': 28,
          'slots': [('Monday', '10:00', '11:15'), ('Wednesday', '10:00', '11:15')],
          'building': '63', 'room': '102'},
     ]},
    {'code': 'MATH 101', 'name': 'Calculus I', 'credits': 4, 'dept': 'Mathematics',
     'sections': [
         {'crn': '20001', 'number': '001', 'instructor': 'Dr. Mohammed Al-Rashid', 'capacity': 35, 'enrolled': 30,
          'slots': [('Sunday', '09:30', '10:45'), ('Tuesday', '09:30', '10:45'), ('Thursday', '09:30', '10:45')],
          'building': '24', 'room': '201'},
     ]},
    {'code': 'PHYS 101', 'name': 'General Physics I', 'credits': 4, 'dept': 'Physics',
     'sections': [
         {'crn': '30001', 'number': '001', 'instructor': 'Dr. Fatima Al-Qahtani', 'capacity': 40, 'enrolled': 35,
          'slots': [('Monday', '11:30', '12:45'), ('Wednesday', '11:30', '12:45')],
          'building': '24', 'room': '301'},
     ]},
    {'code': 'ENGL 101', 'name': 'English Composition', 'credits': 3, 'dept': 'English',
     'sections': [
         {'crn': '40001', 'number': '001', 'instructor': 'Dr. John Smith', 'capacity': 25, 'enrolled': 20,
          'slots': [('Sunday', '13:00', '14:15'), ('Tuesday', '13:00', '14:15')],
          'building': '76', 'room': '401'},
     ]},
    {'code': 'CHEM 101', 'name': 'General Chemistry', 'credits': 4, 'dept': 'Chemistry',
     'sections': [
         {'crn': '50001', 'number': '001', 'instructor': 'Dr. Ali Al-Hamdan', 'capacity': 30, 'enrolled': 25,
          'slots': [('Monday', '14:30', '15:45'), ('Wednesday', '14:30', '15:45')],
          'building': '24', 'room': '401'},
     ]},
]


def build_buildings_df(buildings):
    '''One row per building, list fields joined with commas'''
    df = pd.DataFrame([{
        'Building_Number': b['number'],
        'Building_Name': b['name'],
        'Lat': b['lat'],
        'Lng': b['lng'],
        'Address': b.get('address', 'KFUPM Campus, Dhahran'),
        'Description': b.get('description'),
        'Departments': ', '.join(b.get('departments', [])),
        'Facilities': ', '.join(b.get('facilities', [])),
        'Is_Active': b.get('is_active', True),
    } for b in buildings])
    logging.info(f'Built {len(df)} building rows')
    return df


def build_sections_df(courses, term='Fall', year=2024):
    '''Flatten courses into one row per section meeting time'''
    rows = []
    for course in courses:
        for section in course['sections']:
            for day, start, end in section['slots']:
                rows.append({
                    'Course_Code': course['code'],
                    'Course_Name': course['name'],
                    'Credits': course['credits'],
                    'Department': course['dept'],
                    'Term': term,
                    'Year': year,
                    'CRN': section['crn'],
                    'Section_Number': section['number'],
                    'Instructor': section['instructor'],
                    'Capacity': section['capacity'],
                    'Enrolled': section['enrolled'],
                    'Day': day,
                    'STime': start,
                    'ETime': end,
                    'Building': section['building'],
                    'Room': section['room'],
                    'Is_Online': section.get('is_online', False),
                    'Notes': section.get('notes'),
                    'Is_Active': course.get('is_active', True),
                })
    df = pd.DataFrame(rows)
    logging.info(f'Built {len(df)} section meeting rows')
    return df


def main():
    db_name = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'schedule.db')
    buildings_df = build_buildings_df(SAMPLE_BUILDINGS)
    sections_df = build_sections_df(SAMPLE_COURSES)

    try:
        conn = sqlite3.connect(db_name)
        import_catalog(conn, buildings_df, sections_df)
        conn.close()
    except sqlite3.Error as e:
        logging.error(f'Error importing data to SQLite: {e}')
        sys.exit(1)
    logging.info(f'Sample data imported into SQLite database {db_name}')


if __name__ == "__main__":
    main()
