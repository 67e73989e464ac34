def mock_selected_courses():
    """
    Mock function to simulate user-selected courses.
    """
    selected_courses = ['ICS 101', 'MATH 101', 'PHYS 101', 'ENGL 101', 'CHEM 101']
    # selected_courses = ['ICS 101']
    return selected_courses

def mock_term():
    """
    Mock function to simulate the term the user is planning for.
    """
    return 'Fall', 2024

def mock_preferences():
    """
    Mock function to simulate user input for schedule preferences (stored record format).
    Absent fields fall back to config["default_preferences"].
    """
    preferences = {
        "preferredProfessors": ["Dr. Sarah Al-Zahrani"],
        "avoidEarlyClasses": True,
        "maxWalkingDistance": 15,
        "preferredBuildings": ["63"],
        "avoidBuildings": []
    }
    return preferences
