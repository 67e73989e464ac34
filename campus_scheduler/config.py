# Set to True to let every requested course be left out of a schedule, even when a
# conflict-free section exists (results then include schedules covering any subset of courses).
# Set to False to skip a course only when it has no eligible sections (maximal coverage).
ALLOW_COURSE_OMISSION = True

config = {
    "geo": {
        "earth_radius_km": 6371,
        "walking_speed_kmh": 5.0,  # Average walking speed
        "walking_buffer_min": 2  # Extra minutes for finding the room
    },
    "weights": {
        "base_score": 100,
        "walking_time": 0.5,  # Penalty per minute of walking
        "preferred_professor": 10,  # Bonus per section taught by a preferred professor
        "early_class": 5,  # Penalty per meeting starting before early_class_hour
        "early_class_hour": 9,
        "avoided_building": 15,  # Penalty per section in an avoided building
        "preferred_building": 5,  # Bonus per section in a preferred building
        "excess_walking": 2  # Penalty per minute of walking over the preferred maximum
    },
    "max_schedules": 10,  # Number of top schedules returned
    # Hard cap on search nodes visited; the search is exponential in sections per course.
    # Set to None to disable.
    "max_nodes": 200000,
    "default_preferences": {
        "preferred_professors": [],
        "avoid_early_classes": False,
        "max_walking_distance": 15,  # In minutes
        "preferred_buildings": [],
        "avoid_buildings": []
    }
}
