"""Celery tasks for scheduled collection runs and session housekeeping."""
import logging
from datetime import datetime, timedelta

from dateutil import tz

from opportunityhub.celery import celery
from opportunityhub import db
from opportunityhub.models import CollectionSchedule

logger = logging.getLogger(__name__)


@celery.task(name='opportunityhub.tasks.run_collection_task')
def run_collection_task(user_id):
    """
    Run one collection pass for a user.
    Called by the scheduler; store failures propagate so the task is marked failed.
    """
    from opportunityhub.collection.pipeline import run_collection

    result = run_collection(user_id)
    return result.to_dict()


@celery.task(name='opportunityhub.tasks.check_collection_schedules')
def check_collection_schedules():
    """
    Dispatch collection runs for users whose schedule is due.
    Runs every minute via Celery Beat.
    """
    now = datetime.utcnow()

    due_schedules = CollectionSchedule.query.filter(
        CollectionSchedule.enabled == True,
        CollectionSchedule.next_run <= now
    ).all()

    triggered_count = 0
    for schedule in due_schedules:
        run_collection_task.delay(schedule.user_id)

        schedule.last_run = now
        schedule.next_run = calculate_next_run(schedule, now=now)
        triggered_count += 1

    if triggered_count > 0:
        db.session.commit()

    return {
        'checked_at': now.isoformat(),
        'triggered_count': triggered_count
    }


@celery.task(name='opportunityhub.tasks.purge_expired_drive_sessions')
def purge_expired_drive_sessions():
    from opportunityhub.drive import purge_expired_sessions

    purged = purge_expired_sessions()
    if purged:
        logger.info(f"Purged {purged} expired Drive session(s)")
    return {'purged': purged}


def calculate_next_run(schedule, now=None):
    """
    Calculate the next run time (naive UTC) for a schedule.
    The HH:MM time is interpreted in the schedule's timezone.
    """
    if not schedule.time:
        return None

    try:
        hour, minute = map(int, schedule.time.split(':'))
    except (ValueError, AttributeError):
        return None
    if not (0 <= hour < 24 and 0 <= minute < 60):
        return None

    zone = tz.gettz(schedule.timezone or 'UTC') or tz.UTC
    now = (now or datetime.utcnow()).replace(tzinfo=tz.UTC).astimezone(zone)
    next_run = now.replace(hour=hour, minute=minute, second=0, microsecond=0)

    if schedule.frequency == 'daily':
        if next_run <= now:
            next_run += timedelta(days=1)

    elif schedule.frequency == 'weekly':
        target_day = schedule.day_of_week or 0  # Default to Monday
        days_ahead = target_day - now.weekday()
        if days_ahead < 0:
            days_ahead += 7
        next_run += timedelta(days=days_ahead)

        # Target day but the time has passed, move to next week
        if days_ahead == 0 and next_run <= now:
            next_run += timedelta(days=7)

    else:
        return None

    return next_run.astimezone(tz.UTC).replace(tzinfo=None)
