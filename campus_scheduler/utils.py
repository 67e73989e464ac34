from datetime import datetime
import functools
import logging
import re
import time as timer

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

execution_times = {}
errors = {}
total_execution_time = 0

DAYS_OF_WEEK = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday']
TIME_PATTERN = re.compile(r'^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$')


def record_error(func_name, message):
    """
    Add an error message to the error registry, once per function.

    Args:
        func_name (str): The name of the function that raised the error.
        message (str): The error message.
    """
    if func_name not in errors:
        errors[func_name] = set()
    errors[func_name].add(message)


def time_function(func):
    """
    Decorator to measure the execution time of a function and store the results.

    Args:
        func (function): The function to be wrapped and timed.

    Returns:
        function: The wrapped function with timing functionality.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        global total_execution_time
        start_time = timer.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            func_name = func.__name__
            detailed_message = str(e)
            if "course_codes" in kwargs and kwargs['course_codes']:
                detailed_message = f"{detailed_message} for courses {', '.join(kwargs['course_codes'])}"
            record_error(func_name, detailed_message)
            logger.error(f"{func_name}: {detailed_message}")
            raise
        elapsed_time = timer.perf_counter() - start_time
        total_execution_time += elapsed_time
        func_name = func.__name__

        if func_name not in execution_times:
            execution_times[func_name] = []
        execution_times[func_name].append(elapsed_time)

        logger.debug(f"{func_name} executed in {elapsed_time:.4f} seconds")
        return result
    return wrapper


def is_valid_time(time_str):
    """Check that a string is a 24-hour 'HH:MM' clock time."""
    return isinstance(time_str, str) and bool(TIME_PATTERN.match(time_str))


def parse_time(time_str):
    """
    Parse a 24-hour 'HH:MM' string into a time object.

    Args:
        time_str (str): The time string to be parsed.

    Returns:
        datetime.time: The parsed time object.
    """
    return datetime.strptime(time_str, '%H:%M').time() if time_str else None


def time_to_minutes(time_str):
    """
    Convert a 24-hour 'HH:MM' string to minutes since midnight.

    Args:
        time_str (str): The time string.

    Returns:
        int: Minutes since midnight.
    """
    parsed = parse_time(time_str)
    return parsed.hour * 60 + parsed.minute


def sort_meetings(candidate):
    """
    Flatten a schedule candidate into (section, meeting) pairs sorted by day and start time.

    Args:
        candidate (ScheduleCandidate): The candidate to be sorted.

    Returns:
        list: A list of (section, meeting) tuples.
    """
    pairs = [(section, meeting) for section in candidate.sections for meeting in section.meetings]
    return sorted(pairs, key=lambda pair: (DAYS_OF_WEEK.index(pair[1].day), pair[1].start_minutes))


@time_function
def print_summary(candidates):
    """
    Print a summary of ranked schedule candidates.

    Args:
        candidates (list): A list of ScheduleCandidate objects, best first.
    """
    def format_meeting(section, meeting):
        return (f"{section.course_code}-{section.section_number} (CRN {section.crn}) "
                f"{meeting.day} {meeting.start_time} - {meeting.end_time}, "
                f"building {section.building} room {section.room}, {section.instructor}")

    if not candidates:
        print("No schedules found.")
        return

    print("Generated schedule candidates:")
    for option_number, candidate in enumerate(candidates, start=1):
        print(f"Option {option_number}: Score = {candidate.score}, "
              f"Total Credits = {candidate.total_credits}, "
              f"Total Walking Time = {candidate.total_walking_time} min")
        for section, meeting in sort_meetings(candidate):
            print(format_meeting(section, meeting))
        print()


def print_execution_summary():
    """
    Print a summary of execution times for timed functions.
    """
    print("\nExecution Time Summary:")
    for func_name, times in execution_times.items():
        total_time = sum(times)
        avg_time = total_time / len(times)
        num_loops = len(times)
        print(
            f"{func_name}: Total time = {total_time:.4f} seconds, "
            f"Average time per loop = {avg_time:.4f} seconds, "
            f"Loops = {num_loops}"
        )


def print_error_summary():
    """
    Print a summary of errors encountered during function executions.
    """
    print("\nError Summary:")
    for func_name, error_set in errors.items():
        print(f"{func_name}: {len(error_set)} unique errors")
        for error_message in error_set:
            print(f"  {error_message}")


class ConfigurationError(Exception):
    """Custom exception for configuration errors."""
    pass


class InvalidMeetingTimeError(ValueError):
    """Raised when a meeting time has an unknown day or a malformed or inverted time range."""
    pass


class SearchSpaceTooLargeError(RuntimeError):
    """Raised when the combination search visits more nodes than the configured cap."""

    def __init__(self, max_nodes, nodes_visited):
        self.max_nodes = max_nodes
        self.nodes_visited = nodes_visited
        super().__init__(
            f"Search space too large: visited {nodes_visited} nodes, cap is {max_nodes}"
        )


class CourseNotFoundError(LookupError):
    """Raised when none of the requested courses exist in the catalog."""
    pass
