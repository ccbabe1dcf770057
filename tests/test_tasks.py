from datetime import datetime
from types import SimpleNamespace

from opportunityhub import db, tasks
from opportunityhub.collection import pipeline
from opportunityhub.models import CollectionSchedule
from opportunityhub.tasks import calculate_next_run

# Sunday
NOW = datetime(2026, 10, 18, 8, 0)


def _schedule(frequency='daily', time='09:30', timezone='UTC', day_of_week=None):
    return SimpleNamespace(frequency=frequency, time=time, timezone=timezone, day_of_week=day_of_week)


def test_daily_later_today():
    assert calculate_next_run(_schedule(time='09:30'), now=NOW) == datetime(2026, 10, 18, 9, 30)


def test_daily_time_passed_moves_to_tomorrow():
    assert calculate_next_run(_schedule(time='07:00'), now=NOW) == datetime(2026, 10, 19, 7, 0)


def test_weekly_next_monday():
    schedule = _schedule(frequency='weekly', time='09:00', day_of_week=0)

    assert calculate_next_run(schedule, now=NOW) == datetime(2026, 10, 19, 9, 0)


def test_weekly_same_day_time_passed_moves_a_week():
    schedule = _schedule(frequency='weekly', time='07:00', day_of_week=6)

    assert calculate_next_run(schedule, now=NOW) == datetime(2026, 10, 25, 7, 0)


def test_time_is_interpreted_in_schedule_timezone():
    # 08:00 UTC is 04:00 in New York (EDT, UTC-4)
    schedule = _schedule(time='09:00', timezone='America/New_York')

    assert calculate_next_run(schedule, now=NOW) == datetime(2026, 10, 18, 13, 0)


def test_invalid_schedules_have_no_next_run():
    assert calculate_next_run(_schedule(time='nine'), now=NOW) is None
    assert calculate_next_run(_schedule(time=None), now=NOW) is None
    assert calculate_next_run(_schedule(frequency='hourly'), now=NOW) is None


def test_check_collection_schedules_dispatches_due_users(app, monkeypatch):
    dispatched = []
    monkeypatch.setattr(tasks, 'run_collection_task', SimpleNamespace(delay=dispatched.append))

    due = CollectionSchedule(user_id='due-user', frequency='daily', time='06:00',
                             timezone='UTC', next_run=datetime(2000, 1, 1))
    later = CollectionSchedule(user_id='later-user', frequency='daily', time='06:00',
                               timezone='UTC', next_run=datetime(2999, 1, 1))
    disabled = CollectionSchedule(user_id='off-user', frequency='daily', time='06:00',
                                  timezone='UTC', enabled=False, next_run=datetime(2000, 1, 1))
    db.session.add_all([due, later, disabled])
    db.session.commit()

    result = tasks.check_collection_schedules.run()

    assert result['triggered_count'] == 1
    assert dispatched == ['due-user']
    refreshed = CollectionSchedule.query.filter_by(user_id='due-user').one()
    assert refreshed.last_run is not None
    assert refreshed.next_run > refreshed.last_run


def test_run_collection_task_returns_counts(app, add_source, monkeypatch):
    add_source('u1', 'job')
    monkeypatch.setattr(pipeline, 'get_collector', lambda category: None)

    result = tasks.run_collection_task.run('u1')

    assert result == {'collected': 0, 'verified': 0, 'sourcesProcessed': 0, 'failedSources': []}
