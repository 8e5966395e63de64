from jobwindow.application.services.match_session import MatchSession
from jobwindow.events.bus import EventBus
from jobwindow.events.job_events import MatchJobStartedEvent, SessionClearedEvent


def test_begin_and_end_job():
    session = MatchSession()
    changes = []
    session.current_job_id.changed.connect(lambda new, old: changes.append((new, old)))

    session.begin_job("job-1")
    assert session.job_in_progress is True
    session.end_job("other")
    assert session.current_job_id.value == "job-1"
    session.end_job("job-1")

    assert session.job_in_progress is False
    assert changes == [("job-1", None), (None, "job-1")]


def test_clear_publishes_event():
    bus = EventBus()
    started, cleared = [], []
    bus.subscribe(MatchJobStartedEvent, started.append)
    bus.subscribe(SessionClearedEvent, cleared.append)
    session = MatchSession(bus)

    session.begin_job("job-1")
    session.total_matches.value = 12
    session.clear()

    assert started[0].job_id == "job-1"
    assert len(cleared) == 1
    assert session.current_job_id.value is None
    assert session.total_matches.value is None
