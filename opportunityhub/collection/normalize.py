"""Canonicalization of scraped candidate records.

Deadlines come from free text and are parsed best-effort:

* ``A/B/YYYY`` or ``A-B-YYYY``: the order of ``A`` and ``B`` is not
  guessed. It is taken from ``date_order`` (``"MDY"`` or ``"DMY"``), and a
  value that is not a real date under that order is dropped.
* ``"N days"`` phrases (``"in 10 days"``, ``"3 days left"``): today + N.

Everything else yields no deadline.
"""
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from opportunityhub.models import Category

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 500

_DATE_RE = re.compile(r'(?<!\d)(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})(?!\d)')
_DAYS_RE = re.compile(r'(\d+)\s*days?\b', re.IGNORECASE)


@dataclass
class CanonicalRecord:
    title: Optional[str]
    category: str
    organization: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    prize: Optional[str] = None
    location: Optional[str] = None
    deadline_text: Optional[str] = None
    deadline: Optional[date] = None


def _clean(value, max_length=None) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if max_length is not None and len(text) > max_length:
        text = text[:max_length].rstrip()
    return text


def parse_deadline(text, today: Optional[date] = None, date_order: str = 'MDY') -> Optional[date]:
    """Parse a free-text deadline into a date, or None when it is not understood."""
    if isinstance(text, date):
        return text
    if not text:
        return None

    match = _DATE_RE.search(text)
    if match:
        first, second, year = (int(g) for g in match.groups())
        if date_order.upper() == 'DMY':
            day, month = first, second
        else:
            month, day = first, second
        try:
            return date(year, month, day)
        except ValueError:
            return None

    match = _DAYS_RE.search(text)
    if match:
        return (today or date.today()) + timedelta(days=int(match.group(1)))

    return None


def normalize(candidate, today: Optional[date] = None, date_order: str = 'MDY') -> CanonicalRecord:
    """Map a CandidateRecord to a CanonicalRecord.

    Raises ValueError if the candidate's category is not a known Category.
    """
    category = Category(candidate.category).value

    raw_deadline = candidate.deadline
    deadline_text = raw_deadline.isoformat() if isinstance(raw_deadline, date) else _clean(raw_deadline, 256)

    return CanonicalRecord(
        title=_clean(candidate.title, TITLE_MAX_LENGTH),
        category=category,
        organization=_clean(candidate.organization, 256),
        url=_clean(candidate.url),
        description=_clean(candidate.description, DESCRIPTION_MAX_LENGTH),
        prize=_clean(candidate.prize, 256),
        location=_clean(candidate.location, 256),
        deadline_text=deadline_text,
        deadline=parse_deadline(raw_deadline if isinstance(raw_deadline, date) else deadline_text,
                                today=today, date_order=date_order),
    )
