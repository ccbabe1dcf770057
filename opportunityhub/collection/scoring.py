"""Completeness scoring for canonical records."""
from dataclasses import dataclass, field
from typing import Dict, Tuple

from opportunityhub.models import Category, RecordStatus

DEFAULT_POINTS = {
    'title': 20,
    'organization': 20,
    'url': 20,
    'description': 20,
    'deadline': 10,
    'prize': 10,
    'location': 20,
}

# Categories that earn the deadline/prize bonus
_EVENT_CATEGORIES = {Category.HACKATHON.value, Category.COMPETITION.value}


@dataclass
class ScoringPolicy:
    points: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_POINTS))
    verified_threshold: int = 80
    pending_threshold: int = 60

    @classmethod
    def from_config(cls, config):
        points = dict(DEFAULT_POINTS)
        points.update(config.get('SCORING_POINTS') or {})
        return cls(
            points=points,
            verified_threshold=config.get('VERIFIED_THRESHOLD', 80),
            pending_threshold=config.get('PENDING_THRESHOLD', 60),
        )

    def status_for(self, score: int) -> str:
        if score >= self.verified_threshold:
            return RecordStatus.VERIFIED.value
        if score >= self.pending_threshold:
            return RecordStatus.PENDING.value
        return RecordStatus.REJECTED.value


def compute_score(record, category: str, policy: ScoringPolicy) -> int:
    """Sum the rubric points the record earns, clamped to 0-100."""
    points = policy.points
    score = 0

    if record.title and len(record.title) > 5:
        score += points['title']
    if record.organization and len(record.organization) > 2:
        score += points['organization']
    if record.url and record.url.startswith('http'):
        score += points['url']
    if record.description and len(record.description) > 20:
        score += points['description']

    if category in _EVENT_CATEGORIES:
        if record.deadline_text or record.deadline:
            score += points['deadline']
        if record.prize:
            score += points['prize']

    if category == Category.JOB.value and record.location:
        score += points['location']

    return max(0, min(score, 100))


def score_record(record, category: str, policy: ScoringPolicy = None) -> Tuple[int, str]:
    """Score a canonical record and map the score to a status.

    Returns (score, status) with status one of verified, pending, rejected.
    """
    policy = policy or ScoringPolicy()
    score = compute_score(record, category, policy)
    return score, policy.status_for(score)
