"""Duplicate detection for canonical records."""
from opportunityhub.collection.store import find_by_title_or_url


def is_duplicate(user_id, record) -> bool:
    """Check if the user already has an item with the same title OR the same url.

    Title and url are compared exactly; a shared title alone is enough, even
    across categories.
    """
    return find_by_title_or_url(user_id, record.title, record.url)
