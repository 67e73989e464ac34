import main
from campus_scheduler.utils import CourseNotFoundError


class RecordingConnection:
    def __init__(self):
        self.closed = False

    def cursor(self):
        return None

    def close(self):
        self.closed = True


"""Testing main function."""
def test_main_closes_connection_on_error(monkeypatch):
    """The database connection is closed even when retrieval fails."""
    conn = RecordingConnection()
    monkeypatch.setattr(main.sqlite3, "connect", lambda path: conn)

    def missing_courses(*args, **kwargs):
        raise CourseNotFoundError("No sections found for the requested courses")

    monkeypatch.setattr(main, "retrieve_section_info", missing_courses)
    main.main()
    assert conn.closed, "Connection should be closed after a failed run"
