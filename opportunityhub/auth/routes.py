"""Google OAuth connect/disconnect and Drive file routes."""
import logging
from urllib.parse import quote

from flask import request, jsonify, redirect, current_app

from opportunityhub import drive
from opportunityhub.api.routes import require_api_key
from opportunityhub.auth import bp
from opportunityhub.exports import export_path

logger = logging.getLogger(__name__)


@bp.route('/auth/google', methods=['GET'])
@require_api_key
def google_auth():
    try:
        return jsonify({'authUrl': drive.get_auth_url()})
    except drive.DriveNotConfigured as e:
        return jsonify({'error': f'Drive integration not configured: {e}'}), 500


@bp.route('/auth/google/callback', methods=['GET'])
def google_callback():
    code = request.args.get('code')
    if not code:
        return jsonify({'error': 'Authorization code not provided'}), 400

    try:
        tokens = drive.exchange_code(code)
        user_info = drive.DriveClient(tokens).get_user_info()
    except drive.DriveNotConfigured as e:
        return jsonify({'error': f'Drive integration not configured: {e}'}), 500
    except Exception as e:
        logger.error(f"OAuth callback failed: {e}", exc_info=True)
        return jsonify({'error': f'OAuth callback failed: {e}'}), 500

    session = drive.create_session(tokens, user_info)
    frontend = current_app.config['FRONTEND_URL'].rstrip('/')
    return redirect(f"{frontend}/oauth-success.html?sessionId={quote(session.id)}")


@bp.route('/auth/status/<session_id>', methods=['GET'])
@require_api_key
def auth_status(session_id):
    session = drive.get_session(session_id)
    if session is None:
        return jsonify({'authenticated': False})
    return jsonify({
        'authenticated': True,
        'user': session.user_info,
        'connectedAt': session.created_at.isoformat() if session.created_at else None,
        'expiresAt': session.expires_at.isoformat(),
    })


@bp.route('/auth/disconnect/<session_id>', methods=['POST'])
@require_api_key
def disconnect(session_id):
    if drive.delete_session(session_id):
        return jsonify({'success': True, 'message': 'Disconnected from Google Drive'})
    return jsonify({'error': 'Session not found'}), 404


@bp.route('/drive/upload/<session_id>', methods=['POST'])
@require_api_key
def drive_upload(session_id):
    data = request.get_json(silent=True) or {}
    filename = data.get('filename')
    if not filename:
        return jsonify({'error': 'Missing required field: filename'}), 400

    path = export_path(filename)
    if not path:
        return jsonify({'error': 'File not found'}), 404

    try:
        result = drive.upload_export(session_id, path, filename)
    except drive.DriveSessionNotFound:
        return jsonify({'error': 'Not authenticated'}), 401
    except FileNotFoundError:
        return jsonify({'error': 'File not found'}), 404
    except Exception as e:
        logger.error(f"Drive upload failed: {e}", exc_info=True)
        return jsonify({'error': f'Drive upload failed: {e}'}), 500

    return jsonify({'success': True, 'file': result})


@bp.route('/drive/files/<session_id>', methods=['GET'])
@require_api_key
def drive_files(session_id):
    try:
        session = drive.require_session(session_id)
        files = drive.DriveClient(session.tokens).list_files()
    except drive.DriveSessionNotFound:
        return jsonify({'error': 'Not authenticated'}), 401
    except Exception as e:
        logger.error(f"Listing Drive files failed: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500

    return jsonify({'files': files})
