from types import SimpleNamespace

import pytest
import requests

from opportunityhub.collection import collectors
from opportunityhub.collection.collectors import (
    COLLECTOR_REGISTRY,
    BaseCollector,
    DevpostCollector,
    IndeedCollector,
    get_collector,
    register_collector,
)
from opportunityhub.collection.errors import ScrapeFailure

DEVPOST_HTML = """
<html><body>
  <div class="hackathon-tile">
    <div class="hackathon-tile-header"><h3><a href="/hackathons/ai-builders">AI Builders Hack</a></h3></div>
    <span class="prize-amount">$10,000</span>
    <div class="submission-period">12/31/2026</div>
  </div>
  <div class="hackathon-tile">
    <div class="hackathon-tile-header"><h3></h3></div>
  </div>
  <div class="hackathon-tile">
    <div class="hackathon-tile-header"><h3><a href="https://other.example/h">Green Energy Jam</a></h3></div>
    <div class="hackathon-tile-organizer">Climate Org</div>
    <div class="hackathon-tile-location">Berlin</div>
  </div>
</body></html>
"""

INDEED_HTML = """
<ul>
  <li data-testid="job-result">
    <h2 data-testid="job-title"><a href="/viewjob?jk=1">Python Developer</a></h2>
    <span data-testid="company-name">Acme</span>
    <span data-testid="job-location">Remote</span>
    <div data-testid="job-snippet">Work on our Flask services and data pipelines.</div>
  </li>
</ul>
"""


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} error')


def test_devpost_parse_extracts_cards_with_defaults(app):
    records = DevpostCollector().parse(DEVPOST_HTML, base_url='https://devpost.com/hackathons')

    assert [r.title for r in records] == ['AI Builders Hack', 'Green Energy Jam']
    first, second = records
    assert first.category == 'hackathon'
    assert first.url == 'https://devpost.com/hackathons/ai-builders'
    assert first.organization == 'Devpost'
    assert first.location == 'Online'
    assert first.prize == '$10,000'
    assert first.deadline == '12/31/2026'
    assert first.description == 'Hackathon hosted on Devpost: AI Builders Hack'
    assert second.url == 'https://other.example/h'
    assert second.organization == 'Climate Org'
    assert second.location == 'Berlin'


def test_indeed_collect_fetches_source_url(app, monkeypatch):
    requested = {}

    def fake_get(url, headers=None, timeout=None):
        requested['url'] = url
        requested['timeout'] = timeout
        return FakeResponse(INDEED_HTML)

    monkeypatch.setattr(collectors.requests, 'get', fake_get)
    source = SimpleNamespace(name='Indeed', url='https://www.indeed.com/jobs?q=python')

    records = IndeedCollector().collect(source)

    assert requested == {'url': 'https://www.indeed.com/jobs?q=python', 'timeout': app.config['COLLECTOR_TIMEOUT']}
    assert len(records) == 1
    assert records[0].url == 'https://www.indeed.com/viewjob?jk=1'
    assert records[0].organization == 'Acme'
    assert records[0].description == 'Work on our Flask services and data pipelines.'


def test_collect_falls_back_to_default_url(app, monkeypatch):
    requested = []
    monkeypatch.setattr(
        collectors.requests, 'get',
        lambda url, headers=None, timeout=None: requested.append(url) or FakeResponse(DEVPOST_HTML),
    )

    DevpostCollector().collect(SimpleNamespace(name='Devpost', url=None))

    assert requested == [DevpostCollector.default_url]


def test_network_error_raises_scrape_failure(app, monkeypatch):
    def fake_get(url, headers=None, timeout=None):
        raise requests.ConnectionError('connection refused')

    monkeypatch.setattr(collectors.requests, 'get', fake_get)

    with pytest.raises(ScrapeFailure) as excinfo:
        DevpostCollector().collect(SimpleNamespace(name='Devpost', url='https://devpost.com/hackathons'))

    assert excinfo.value.source_name == 'Devpost'


def test_http_error_raises_scrape_failure(app, monkeypatch):
    monkeypatch.setattr(
        collectors.requests, 'get',
        lambda url, headers=None, timeout=None: FakeResponse('', status_code=503),
    )

    with pytest.raises(ScrapeFailure):
        IndeedCollector().collect(SimpleNamespace(name='Indeed', url='https://www.indeed.com/jobs'))


def test_selector_miss_raises_scrape_failure(app):
    with pytest.raises(ScrapeFailure):
        DevpostCollector().parse('<html><body><p>Nothing here</p></body></html>')


def test_results_are_capped(app):
    app.config['COLLECTOR_MAX_ITEMS'] = 1

    records = DevpostCollector().parse(DEVPOST_HTML, base_url='https://devpost.com/hackathons')

    assert [r.title for r in records] == ['AI Builders Hack']


def test_registry_covers_every_category():
    assert sorted(COLLECTOR_REGISTRY) == ['certification', 'competition', 'hackathon', 'job']
    assert isinstance(get_collector('job'), IndeedCollector)
    assert get_collector('scholarship') is None


def test_register_collector_adds_new_category(monkeypatch):
    monkeypatch.setattr(collectors, 'COLLECTOR_REGISTRY', dict(COLLECTOR_REGISTRY))

    class GrantCollector(BaseCollector):
        category = 'grant'

    register_collector('grant', GrantCollector)

    assert isinstance(get_collector('grant'), GrantCollector)
