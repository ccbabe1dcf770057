import logging
from datetime import date

import pytest

from opportunityhub import db
from opportunityhub.collection import pipeline
from opportunityhub.collection.collectors import CandidateRecord
from opportunityhub.collection.errors import PersistenceFailure, ScrapeFailure
from opportunityhub.collection.pipeline import run_collection, select_sources
from opportunityhub.models import CollectedItem, DataSource


def _job(title, url, **fields):
    fields.setdefault('organization', 'Acme Corp')
    fields.setdefault('description', 'A role building data pipelines for analytics.')
    fields.setdefault('location', 'Remote')
    return CandidateRecord(title=title, url=url, category='job', **fields)


def test_only_first_source_per_category_is_collected(add_source):
    first = add_source('u1', 'job', name='Indeed')
    add_source('u1', 'job', name='Other Board')
    seen = []

    def collect_jobs(source):
        seen.append(source.name)
        return [_job('Backend Engineer', 'https://jobs.example/1')]

    result = run_collection('u1', collectors={'job': collect_jobs})

    assert seen == [first.name]
    assert result.sources_processed == 1
    assert result.collected == 1


def test_failing_collector_does_not_stop_the_run(add_source):
    add_source('u1', 'hackathon', name='Broken Hackathons')
    add_source('u1', 'job', name='Indeed')

    def broken(source):
        raise ScrapeFailure('selector miss', source_name=source.name)

    def collect_jobs(source):
        return [
            _job('Backend Engineer', 'https://jobs.example/1'),
            _job('Frontend Engineer', 'https://jobs.example/2'),
        ]

    result = run_collection('u1', collectors={'hackathon': broken, 'job': collect_jobs})

    assert result.collected == 2
    assert result.verified == 2
    assert result.sources_processed == 2
    assert result.failed_sources == ['Broken Hackathons']


def test_unexpected_collector_errors_are_contained(add_source):
    add_source('u1', 'competition')
    add_source('u1', 'job')

    def explode(source):
        raise RuntimeError('boom')

    result = run_collection('u1', collectors={
        'competition': explode,
        'job': lambda source: [_job('Site Reliability Engineer', 'https://jobs.example/9')],
    })

    assert result.collected == 1
    assert len(result.failed_sources) == 1


def test_duplicates_are_skipped_within_and_across_runs(add_source):
    add_source('u1', 'job')
    items = [
        _job('Backend Engineer', 'https://jobs.example/1'),
        _job('Backend Engineer', 'https://jobs.example/2'),
    ]

    first = run_collection('u1', collectors={'job': lambda source: items})
    second = run_collection('u1', collectors={'job': lambda source: items})

    assert first.collected == 1
    assert second.collected == 0
    assert CollectedItem.query.filter_by(user_id='u1').count() == 1


def test_low_quality_records_are_stored_as_rejected(add_source):
    add_source('u1', 'hackathon')
    candidate = CandidateRecord(title='Hack', category='hackathon')

    result = run_collection('u1', collectors={'hackathon': lambda source: [candidate]})

    item = CollectedItem.query.filter_by(user_id='u1').one()
    assert result.collected == 1
    assert result.verified == 0
    assert item.status == 'rejected'
    assert item.quality_score == 0


def test_deadlines_are_parsed_with_injected_clock(add_source):
    add_source('u1', 'hackathon')
    candidate = CandidateRecord(
        title='Climate Hack 2026',
        category='hackathon',
        organization='Devpost',
        url='https://devpost.example/climate',
        description='Build tools that help communities adapt to heat.',
        prize='$10,000',
        deadline='in 10 days',
    )

    run_collection('u1', collectors={'hackathon': lambda source: [candidate]}, today=date(2026, 10, 18))

    item = CollectedItem.query.filter_by(user_id='u1').one()
    assert item.deadline == date(2026, 10, 28)
    assert item.deadline_text == 'in 10 days'
    assert item.quality_score == 100


def test_inactive_sources_are_ignored(add_source):
    add_source('u1', 'job', is_active=False)
    calls = []

    result = run_collection('u1', collectors={'job': lambda source: calls.append(source) or []})

    assert calls == []
    assert result.sources_processed == 0


def test_first_run_seeds_default_sources(app):
    result = run_collection('new-user', collectors={})

    categories = sorted(s.category for s in DataSource.query.filter_by(user_id='new-user'))
    assert categories == ['certification', 'competition', 'hackathon', 'job']
    assert result.sources_processed == 0


def test_persistence_failure_aborts_the_run(add_source, monkeypatch):
    add_source('u1', 'job')

    def failing_insert(item):
        raise PersistenceFailure('disk full')

    monkeypatch.setattr(pipeline, 'insert_record', failing_insert)

    with pytest.raises(PersistenceFailure):
        run_collection('u1', collectors={'job': lambda source: [_job('Backend Engineer', 'https://jobs.example/1')]})


def test_collector_objects_with_collect_method_are_supported(add_source):
    add_source('u1', 'job')

    class FakeCollector:
        def collect(self, source):
            return [_job('QA Engineer', 'https://jobs.example/qa')]

    result = run_collection('u1', collectors={'job': FakeCollector()})

    assert result.collected == 1


def test_select_sources_keeps_order():
    class Source:
        def __init__(self, name, category):
            self.name = name
            self.category = category

    sources = [Source('a', 'job'), Source('b', 'hackathon'), Source('c', 'job'), Source('d', 'competition')]

    assert [s.name for s in select_sources(sources)] == ['a', 'b', 'd']


def test_unreadable_store_raises_persistence_failure(add_source):
    add_source('u1', 'job')
    CollectedItem.__table__.drop(db.engine)

    with pytest.raises(PersistenceFailure):
        run_collection('u1', collectors={
            'job': lambda source: [_job('Backend Engineer', 'https://jobs.example/1')],
        })

    # Session was rolled back and is usable again
    assert DataSource.query.filter_by(user_id='u1').count() == 1


def test_unreadable_sources_raise_persistence_failure(app):
    DataSource.__table__.drop(db.engine)

    with pytest.raises(PersistenceFailure):
        run_collection('u1', collectors={})


def test_unexpected_collector_errors_log_a_traceback(add_source, caplog):
    add_source('u1', 'hackathon', name='Broken Hackathons')
    add_source('u1', 'competition', name='Exploding Competitions')

    def broken(source):
        raise ScrapeFailure('selector miss', source_name=source.name)

    def explode(source):
        raise RuntimeError('boom')

    with caplog.at_level(logging.ERROR, logger=pipeline.__name__):
        run_collection('u1', collectors={'hackathon': broken, 'competition': explode})

    by_source = {
        name: record for record in caplog.records
        for name in ('Broken Hackathons', 'Exploding Competitions')
        if name in record.getMessage()
    }
    assert by_source['Broken Hackathons'].exc_info is None
    assert by_source['Exploding Competitions'].exc_info is not None
