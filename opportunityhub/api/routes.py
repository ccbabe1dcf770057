import logging
import os
from datetime import datetime
from functools import wraps

from dateutil import tz
from flask import request, jsonify, current_app, send_file

from opportunityhub import db
from opportunityhub.api import bp
from opportunityhub.collection import COLLECTOR_REGISTRY
from opportunityhub.collection.errors import PersistenceFailure
from opportunityhub.collection.pipeline import run_collection
from opportunityhub.collection.store import aggregate_counts, query_records
from opportunityhub.exports import export_items, export_path
from opportunityhub.models import Category, CollectionSchedule, DataSource, ExportHistory, RecordStatus
from opportunityhub.tasks import calculate_next_run

logger = logging.getLogger(__name__)

MAX_QUERY_LIMIT = 1000


def require_api_key(f):
    """
    Validates the X-API-Key header against the configured API_KEY.
    When no API_KEY is configured the API is open (local demo mode).
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = current_app.config.get('API_KEY')
        if not expected:
            return f(*args, **kwargs)

        api_key = request.headers.get('X-API-Key')
        if not api_key:
            return jsonify({'error': 'Missing API key'}), 401
        if api_key != expected:
            return jsonify({'error': 'Invalid API key'}), 401

        return f(*args, **kwargs)

    return decorated_function


@bp.route('/health', methods=['GET'])
def health():
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.utcnow().isoformat(),
        'collectors': sorted(COLLECTOR_REGISTRY),
        'googleDrive': bool(current_app.config.get('GOOGLE_CLIENT_ID')),
    })


@bp.route('/dashboard/<user_id>', methods=['GET'])
@require_api_key
def dashboard(user_id):
    counts = aggregate_counts(user_id)
    return jsonify({
        'total': counts['total'],
        'verified': counts['verified'],
        'pending': counts['pending'],
        'rejected': counts['rejected'],
        'categories': counts['by_category'],
    })


@bp.route('/sources/<user_id>', methods=['GET'])
@require_api_key
def get_sources(user_id):
    sources = DataSource.query.filter_by(user_id=user_id).order_by(DataSource.id.desc()).all()
    return jsonify([source.to_dict() for source in sources])


@bp.route('/sources', methods=['POST'])
@require_api_key
def create_source():
    """
    Register a data source.

    Expected format:
    {"userId": "...", "name": "...", "url": "https://...", "type": "hackathon"}
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    for field in ('userId', 'name', 'type'):
        if not data.get(field):
            return jsonify({'error': f'Missing required field: {field}'}), 400

    if data['type'] not in Category.values():
        return jsonify({'error': f"Invalid type '{data['type']}'", 'allowed': Category.values()}), 400

    source = DataSource(
        user_id=data['userId'],
        name=data['name'],
        url=data.get('url'),
        category=data['type'],
        is_active=bool(data.get('active', True)),
    )
    db.session.add(source)
    db.session.commit()

    return jsonify(source.to_dict()), 201


@bp.route('/sources/<int:source_id>', methods=['PATCH'])
@require_api_key
def update_source(source_id):
    source = DataSource.query.get(source_id)
    if not source:
        return jsonify({'error': 'Source not found'}), 404

    data = request.get_json(silent=True) or {}
    if 'name' in data:
        if not data['name']:
            return jsonify({'error': 'name cannot be empty'}), 400
        source.name = data['name']
    if 'url' in data:
        source.url = data['url']
    if 'active' in data:
        source.is_active = bool(data['active'])

    db.session.commit()
    return jsonify(source.to_dict())


@bp.route('/sources/<int:source_id>', methods=['DELETE'])
@require_api_key
def delete_source(source_id):
    source = DataSource.query.get(source_id)
    if not source:
        return jsonify({'error': 'Source not found'}), 404

    db.session.delete(source)
    db.session.commit()
    return jsonify({'success': True})


@bp.route('/collect/<user_id>', methods=['POST'])
@require_api_key
def collect(user_id):
    logger.info(f"Starting data collection for user: {user_id}")
    try:
        result = run_collection(user_id)
    except PersistenceFailure as e:
        logger.error(f"Data collection failed for user {user_id}: {e}")
        return jsonify({'error': f'Data collection failed: {e}'}), 500

    response = {'success': True}
    response.update(result.to_dict())
    return jsonify(response)


@bp.route('/data/<user_id>', methods=['GET'])
@require_api_key
def get_data(user_id):
    category = request.args.get('category')
    status = request.args.get('status')
    limit = request.args.get('limit', current_app.config['ITEMS_PER_PAGE'], type=int)

    if status and status not in RecordStatus.values():
        return jsonify({'error': f"Invalid status '{status}'"}), 400
    limit = max(1, min(limit, MAX_QUERY_LIMIT))

    items = query_records(user_id, category=category, status=status, limit=limit)
    return jsonify([item.to_dict() for item in items])


@bp.route('/export/<user_id>', methods=['POST'])
@require_api_key
def export(user_id):
    data = request.get_json(silent=True) or {}
    categories = data.get('categories') or None
    if categories is not None and not isinstance(categories, list):
        return jsonify({'error': 'categories must be a list'}), 400

    upload = None
    session_id = data.get('sessionId')
    if data.get('uploadToDrive') and session_id:
        from opportunityhub.drive import upload_export

        def upload(path, filename):
            return upload_export(session_id, path, filename)

    history = export_items(user_id, categories=categories, upload=upload)
    if history is None:
        return jsonify({'success': False, 'error': 'No data found to export'})

    return jsonify({
        'success': True,
        'filename': history.filename,
        'items': history.items_count,
        'downloadUrl': f'/api/download/{history.filename}',
        'driveLink': history.drive_view_link,
        'uploadedToDrive': bool(history.drive_file_id),
    })


@bp.route('/download/<path:filename>', methods=['GET'])
@require_api_key
def download(filename):
    path = export_path(filename)
    if not path or not os.path.exists(path):
        return jsonify({'error': 'File not found'}), 404
    return send_file(path, as_attachment=True, download_name=os.path.basename(path))


@bp.route('/exports/<user_id>', methods=['GET'])
@require_api_key
def get_exports(user_id):
    history = ExportHistory.query.filter_by(user_id=user_id).order_by(
        ExportHistory.created_at.desc()
    ).limit(current_app.config['EXPORT_HISTORY_LIMIT']).all()
    return jsonify([entry.to_dict() for entry in history])


@bp.route('/schedule/<user_id>', methods=['GET'])
@require_api_key
def get_schedule(user_id):
    schedule = CollectionSchedule.query.filter_by(user_id=user_id).first()
    if not schedule:
        return jsonify({'error': 'No schedule configured'}), 404
    return jsonify(schedule.to_dict())


@bp.route('/schedule/<user_id>', methods=['POST'])
@require_api_key
def save_schedule(user_id):
    """
    Create or replace the user's collection schedule.

    Expected format:
    {"frequency": "daily|weekly", "time": "HH:MM", "timezone": "UTC",
     "dayOfWeek": 0, "enabled": true}
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    frequency = data.get('frequency', 'daily')
    if frequency not in ('daily', 'weekly'):
        return jsonify({'error': 'frequency must be daily or weekly'}), 400

    timezone = data.get('timezone') or 'UTC'
    if tz.gettz(timezone) is None:
        return jsonify({'error': f"Unknown timezone '{timezone}'"}), 400

    day_of_week = data.get('dayOfWeek')
    if day_of_week is not None:
        try:
            day_of_week = int(day_of_week)
        except (ValueError, TypeError):
            return jsonify({'error': 'dayOfWeek must be an integer 0-6'}), 400
        if not 0 <= day_of_week <= 6:
            return jsonify({'error': 'dayOfWeek must be an integer 0-6'}), 400

    schedule = CollectionSchedule.query.filter_by(user_id=user_id).first()
    if not schedule:
        schedule = CollectionSchedule(user_id=user_id)
        db.session.add(schedule)

    schedule.frequency = frequency
    schedule.time = data.get('time')
    schedule.timezone = timezone
    schedule.day_of_week = day_of_week
    schedule.enabled = bool(data.get('enabled', True))

    next_run = calculate_next_run(schedule)
    if next_run is None:
        db.session.rollback()
        return jsonify({'error': 'time must be in HH:MM format'}), 400
    schedule.next_run = next_run

    db.session.commit()
    return jsonify({'success': True, 'schedule': schedule.to_dict()})
