"""Category-specific collectors that scrape opportunity listings."""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Type, Union
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup
from flask import current_app

from opportunityhub.collection.errors import ScrapeFailure

logger = logging.getLogger(__name__)


@dataclass
class CandidateRecord:
    title: Optional[str]
    category: str
    organization: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    prize: Optional[str] = None
    deadline: Optional[Union[str, date]] = None
    location: Optional[str] = None


class BaseCollector:
    """Abstract base class for collectors.

    Subclasses describe a listing page: the CSS selector for one card and a
    selector per field inside the card. Cards without a title are dropped.
    """

    category: str = ''
    default_url: str = ''
    card_selector: str = ''
    field_selectors: Dict[str, str] = {}
    defaults: Dict[str, str] = {}

    def collect(self, source) -> List[CandidateRecord]:
        url = source.url or self.default_url
        html = self._fetch(url, source.name)
        records = self.parse(html, base_url=url)
        logger.info(f"{type(self).__name__}: found {len(records)} {self.category} listings at {url}")
        return records

    def _fetch(self, url, source_name=None) -> str:
        try:
            resp = requests.get(
                url,
                headers={'User-Agent': current_app.config['COLLECTOR_USER_AGENT']},
                timeout=current_app.config['COLLECTOR_TIMEOUT'],
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise ScrapeFailure(f"Failed to fetch {url}: {e}", source_name=source_name) from e
        return resp.text

    def parse(self, html: str, base_url: str = '') -> List[CandidateRecord]:
        soup = BeautifulSoup(html, 'html.parser')
        cards = soup.select(self.card_selector)
        if not cards:
            raise ScrapeFailure(f"No elements matched '{self.card_selector}' at {base_url}")

        max_items = current_app.config.get('COLLECTOR_MAX_ITEMS', 10)
        records = []
        for card in cards[:max_items]:
            fields = {name: self._text(card, selector) for name, selector in self.field_selectors.items()}
            if not fields.get('title'):
                continue

            link = card.select_one(self.field_selectors.get('title', 'a'))
            href = link.get('href') if link is not None else None
            if href is None:
                anchor = card.find('a', href=True)
                href = anchor['href'] if anchor else None

            for name, value in self.defaults.items():
                if not fields.get(name):
                    fields[name] = value.format(**fields)

            records.append(CandidateRecord(
                category=self.category,
                url=urljoin(base_url, href) if href else None,
                **fields,
            ))
        return records

    @staticmethod
    def _text(card, selector) -> Optional[str]:
        el = card.select_one(selector)
        if el is None:
            return None
        text = el.get_text(' ', strip=True)
        return text or None


class DevpostCollector(BaseCollector):
    category = 'hackathon'
    default_url = 'https://devpost.com/hackathons'
    card_selector = '.hackathon-tile'
    field_selectors = {
        'title': '.hackathon-tile-header h3 a, h3',
        'organization': '.hackathon-tile-organizer, .host-label',
        'prize': '.prize-amount',
        'deadline': '.submission-period',
        'location': '.hackathon-tile-location, .info span',
    }
    defaults = {
        'organization': 'Devpost',
        'location': 'Online',
        'description': 'Hackathon hosted on Devpost: {title}',
    }


class IndeedCollector(BaseCollector):
    category = 'job'
    default_url = 'https://www.indeed.com/jobs?q=software+developer&l=remote'
    card_selector = '[data-testid="job-result"], .job_seen_beacon'
    field_selectors = {
        'title': '[data-testid="job-title"] a, h2.jobTitle a',
        'organization': '[data-testid="company-name"]',
        'location': '[data-testid="job-location"], [data-testid="text-location"]',
        'prize': '[data-testid="salary-snippet"]',
        'description': '[data-testid="job-snippet"], .job-snippet',
    }
    defaults = {
        'organization': 'Unknown Company',
        'location': 'Remote',
        'description': '{title} position',
    }


class KaggleCollector(BaseCollector):
    category = 'competition'
    default_url = 'https://www.kaggle.com/competitions'
    card_selector = 'li.competition, [data-testid="competition-list-item"]'
    field_selectors = {
        'title': 'a[href*="/competitions/"]',
        'organization': '.competition-host',
        'prize': '.competition-reward',
        'deadline': '.competition-deadline',
        'description': '.competition-description',
    }
    defaults = {
        'organization': 'Kaggle',
        'location': 'Online',
        'description': 'Data science competition on Kaggle: {title}',
    }


class CourseraCollector(BaseCollector):
    category = 'certification'
    default_url = 'https://www.coursera.org/courses?query=free'
    card_selector = '.cds-ProductCard-gridCard, li.ais-InfiniteHits-item'
    field_selectors = {
        'title': 'h3',
        'organization': '.cds-ProductCard-partnerNames, .partner-name',
        'description': '.cds-ProductCard-body p, .card-description',
    }
    defaults = {
        'organization': 'Coursera',
        'location': 'Online',
        'description': 'Online certification course on Coursera: {title}',
    }


COLLECTOR_REGISTRY: Dict[str, Type[BaseCollector]] = {
    'hackathon': DevpostCollector,
    'job': IndeedCollector,
    'competition': KaggleCollector,
    'certification': CourseraCollector,
}


def register_collector(category: str, collector_class: Type[BaseCollector]):
    """Register (or replace) the collector used for a category."""
    COLLECTOR_REGISTRY[category] = collector_class


def get_collector(category: str) -> Optional[BaseCollector]:
    """Factory function to get a collector instance for the given category."""
    collector_class = COLLECTOR_REGISTRY.get(category)
    if collector_class:
        return collector_class()
    return None
