"""Persistence of collected items, scoped by user."""
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from opportunityhub import db
from opportunityhub.collection.errors import PersistenceFailure
from opportunityhub.models import CollectedItem, RecordStatus

logger = logging.getLogger(__name__)


def insert_record(item: CollectedItem) -> str:
    """Insert and commit a single collected item, returning its id."""
    try:
        db.session.add(item)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to store item '{item.title}' for user {item.user_id}: {e}")
        raise PersistenceFailure(str(e)) from e
    return item.id


def find_by_title_or_url(user_id, title, url) -> bool:
    """True if the user already has an item with this title or this url."""
    conditions = []
    if title:
        conditions.append(CollectedItem.title == title)
    if url:
        conditions.append(CollectedItem.url == url)
    if not conditions:
        return False

    try:
        match = CollectedItem.query.filter(
            CollectedItem.user_id == user_id,
            db.or_(*conditions),
        ).first()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Duplicate lookup failed for user {user_id}: {e}")
        raise PersistenceFailure(str(e)) from e
    return match is not None


def query_records(user_id, category=None, status=None, limit=100):
    query = CollectedItem.query.filter_by(user_id=user_id)

    if category and category != 'all':
        query = query.filter_by(category=category)
    if status:
        query = query.filter_by(status=status)

    return query.order_by(CollectedItem.collected_at.desc()).limit(limit).all()


def aggregate_counts(user_id) -> dict:
    """Dashboard totals: overall, per status and per category."""
    status_rows = db.session.query(
        CollectedItem.status, func.count(CollectedItem.id)
    ).filter(CollectedItem.user_id == user_id).group_by(CollectedItem.status).all()

    category_rows = db.session.query(
        CollectedItem.category, func.count(CollectedItem.id)
    ).filter(CollectedItem.user_id == user_id).group_by(CollectedItem.category).all()

    by_status = {status: count for status, count in status_rows}
    return {
        'total': sum(by_status.values()),
        'verified': by_status.get(RecordStatus.VERIFIED.value, 0),
        'pending': by_status.get(RecordStatus.PENDING.value, 0),
        'rejected': by_status.get(RecordStatus.REJECTED.value, 0),
        'by_category': {category: count for category, count in category_rows},
    }
