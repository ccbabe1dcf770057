"""CSV export of collected items."""
import csv
import logging
import os
from datetime import datetime

from flask import current_app

from opportunityhub import db
from opportunityhub.models import CollectedItem, ExportHistory

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    ('title', 'Title'),
    ('category', 'Category'),
    ('organization', 'Organization'),
    ('deadline', 'Deadline'),
    ('location', 'Location'),
    ('prize', 'Prize'),
    ('url', 'URL'),
    ('status', 'Status'),
    ('quality_score', 'Quality Score'),
    ('collected_at', 'Collected Date'),
]


def exports_dir() -> str:
    path = current_app.config['EXPORTS_DIR']
    os.makedirs(path, exist_ok=True)
    return path


def export_path(filename) -> str:
    """Absolute path of an export file, or None if the name would escape the exports directory."""
    base = os.path.realpath(exports_dir())
    path = os.path.realpath(os.path.join(base, filename))
    if os.path.dirname(path) != base:
        return None
    return path


def _cell(item, attr):
    value = getattr(item, attr)
    if value is None:
        value = item.deadline_text if attr == 'deadline' else ''
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return value if value is not None else ''


def write_csv(items, path):
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow([header for _, header in CSV_COLUMNS])
        for item in items:
            writer.writerow([_cell(item, attr) for attr, _ in CSV_COLUMNS])


def export_items(user_id, categories=None, upload=None):
    """Write the user's items to a CSV file and record the export.

    ``upload`` is an optional callable ``(path, filename) -> dict`` that
    pushes the file elsewhere (Google Drive); its failure is logged and
    does not fail the export. Returns None when there is nothing to export.
    """
    query = CollectedItem.query.filter_by(user_id=user_id)
    if categories:
        query = query.filter(CollectedItem.category.in_(categories))
    items = query.order_by(CollectedItem.collected_at.desc()).all()

    if not items:
        return None

    filename = f"opportunities_{datetime.utcnow().strftime('%Y%m%d%H%M%S%f')}.csv"
    path = os.path.join(exports_dir(), filename)
    write_csv(items, path)

    drive_result = None
    if upload is not None:
        try:
            drive_result = upload(path, filename)
        except Exception as e:
            logger.error(f"Drive upload failed for {filename}: {e}", exc_info=True)

    history = ExportHistory(
        user_id=user_id,
        filename=filename,
        format='csv',
        items_count=len(items),
        status='completed',
        local_path=path,
        drive_file_id=(drive_result or {}).get('fileId'),
        drive_view_link=(drive_result or {}).get('viewLink'),
        drive_download_link=(drive_result or {}).get('downloadLink'),
    )
    db.session.add(history)
    db.session.commit()

    logger.info(f"Export completed: {filename} with {len(items)} items")
    return history
