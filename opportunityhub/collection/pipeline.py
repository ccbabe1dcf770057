"""Collection run: scrape, normalize, deduplicate, score and store.

Sources are processed one at a time in registry order. Only the first
active source of each category is used per run; later sources of the same
category are skipped. A collector failure costs only that source, while a
store failure aborts the run with PersistenceFailure.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from opportunityhub import db
from opportunityhub.collection.collectors import get_collector
from opportunityhub.collection.dedup import is_duplicate
from opportunityhub.collection.errors import PersistenceFailure, ScrapeFailure
from opportunityhub.collection.normalize import normalize
from opportunityhub.collection.scoring import ScoringPolicy, score_record
from opportunityhub.collection.store import insert_record
from opportunityhub.models import CollectedItem, DataSource, RecordStatus

logger = logging.getLogger(__name__)

DEFAULT_SOURCES = [
    {'name': 'Devpost Hackathons', 'url': 'https://devpost.com/hackathons', 'category': 'hackathon'},
    {'name': 'Indeed Jobs', 'url': 'https://www.indeed.com/jobs?q=software+developer&l=remote', 'category': 'job'},
    {'name': 'Kaggle Competitions', 'url': 'https://www.kaggle.com/competitions', 'category': 'competition'},
    {'name': 'Coursera Free Courses', 'url': 'https://www.coursera.org/courses?query=free', 'category': 'certification'},
]


@dataclass
class CollectionResult:
    collected: int = 0
    verified: int = 0
    sources_processed: int = 0
    failed_sources: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'collected': self.collected,
            'verified': self.verified,
            'sourcesProcessed': self.sources_processed,
            'failedSources': list(self.failed_sources),
        }


def ensure_default_sources(user_id) -> int:
    """Seed one default source per category for a user with no sources. Returns the number created."""
    if DataSource.query.filter_by(user_id=user_id).first() is not None:
        return 0

    logger.info(f"No sources for user {user_id}, creating default sources")
    for fields in DEFAULT_SOURCES:
        db.session.add(DataSource(user_id=user_id, **fields))
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceFailure(f"Could not seed default sources: {e}") from e
    return len(DEFAULT_SOURCES)


def select_sources(sources) -> list:
    """Keep the first source of each category, in order."""
    selected = []
    seen_categories = set()
    for source in sources:
        if source.category in seen_categories:
            logger.debug(f"Skipping source {source.name}: category '{source.category}' already selected")
            continue
        seen_categories.add(source.category)
        selected.append(source)
    return selected


def _resolve_collector(category, collectors):
    collector = get_collector(category) if collectors is None else collectors.get(category)
    if collector is None:
        return None
    # Plain callables are accepted alongside BaseCollector instances
    return getattr(collector, 'collect', collector)


def run_collection(user_id, collectors: Optional[Dict[str, Callable]] = None,
                   policy: Optional[ScoringPolicy] = None,
                   today: Optional[date] = None) -> CollectionResult:
    """Run one collection pass for a user.

    ``collectors`` maps category to a collector (or a callable taking a
    source); by default the collector registry is used.
    """
    policy = policy or ScoringPolicy.from_config(current_app.config)
    date_order = current_app.config.get('DEADLINE_DATE_ORDER', 'MDY')
    result = CollectionResult()

    try:
        ensure_default_sources(user_id)
        sources = DataSource.query.filter_by(
            user_id=user_id, is_active=True
        ).order_by(DataSource.id).all()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceFailure(f"Could not load sources for user {user_id}: {e}") from e

    for source in select_sources(sources):
        collector = _resolve_collector(source.category, collectors)
        if collector is None:
            logger.info(f"No collector for category '{source.category}', skipping {source.name}")
            continue

        result.sources_processed += 1
        logger.info(f"Collecting {source.category} from {source.name} ({source.id})")
        try:
            candidates = collector(source) or []
        except ScrapeFailure as e:
            logger.error(f"Collector error for source {source.name} ({source.id}): {e}")
            result.failed_sources.append(source.name)
            continue
        except Exception as e:
            logger.error(f"Unexpected collector error for source {source.name} ({source.id}): {e}", exc_info=True)
            result.failed_sources.append(source.name)
            continue

        for candidate in candidates:
            try:
                record = normalize(candidate, today=today, date_order=date_order)
            except ValueError as e:
                logger.warning(f"Dropping candidate from {source.name}: {e}")
                continue

            if is_duplicate(user_id, record):
                continue

            score, status = score_record(record, source.category, policy)
            insert_record(CollectedItem(
                user_id=user_id,
                title=record.title,
                category=source.category,
                organization=record.organization,
                url=record.url,
                description=record.description,
                prize=record.prize,
                location=record.location,
                deadline_text=record.deadline_text,
                deadline=record.deadline,
                quality_score=score,
                status=status,
            ))

            result.collected += 1
            if status == RecordStatus.VERIFIED.value:
                result.verified += 1

    logger.info(f"Collection complete for user {user_id}: {result}")
    return result
