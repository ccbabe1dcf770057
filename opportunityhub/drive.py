"""Google Drive upload for exports, plus the server-side OAuth session store.

Sessions are rows in ``drive_session``: created on the OAuth callback, read
by status/upload/list calls, deleted on disconnect, and evicted once
``expires_at`` has passed.
"""
import logging
import os
from datetime import datetime, timedelta

from flask import current_app
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from googleapiclient.http import MediaFileUpload

from opportunityhub import db
from opportunityhub.models import DriveSession

logger = logging.getLogger(__name__)

SCOPES = [
    'openid',
    'https://www.googleapis.com/auth/drive.file',
    'https://www.googleapis.com/auth/userinfo.profile',
    'https://www.googleapis.com/auth/userinfo.email',
]
TOKEN_URI = 'https://oauth2.googleapis.com/token'
FOLDER_MIME_TYPE = 'application/vnd.google-apps.folder'


class DriveNotConfigured(Exception):
    pass


class DriveSessionNotFound(Exception):
    pass


def _client_config():
    client_id = current_app.config.get('GOOGLE_CLIENT_ID')
    client_secret = current_app.config.get('GOOGLE_CLIENT_SECRET')
    if not client_id or not client_secret:
        raise DriveNotConfigured('Missing GOOGLE_CLIENT_ID or GOOGLE_CLIENT_SECRET')
    return {
        'web': {
            'client_id': client_id,
            'client_secret': client_secret,
            'auth_uri': 'https://accounts.google.com/o/oauth2/auth',
            'token_uri': TOKEN_URI,
            'redirect_uris': [current_app.config['GOOGLE_REDIRECT_URI']],
        }
    }


def _flow():
    return Flow.from_client_config(
        _client_config(),
        scopes=SCOPES,
        redirect_uri=current_app.config['GOOGLE_REDIRECT_URI'],
        autogenerate_code_verifier=False,
    )


def get_auth_url() -> str:
    auth_url, _state = _flow().authorization_url(access_type='offline', prompt='consent')
    return auth_url


def exchange_code(code) -> dict:
    """Exchange an authorization code for a token dict suitable for storage."""
    flow = _flow()
    flow.fetch_token(code=code)
    creds = flow.credentials
    return {
        'token': creds.token,
        'refresh_token': creds.refresh_token,
        'expiry': creds.expiry.isoformat() if creds.expiry else None,
        'scopes': list(creds.scopes or SCOPES),
    }


def credentials_from_tokens(tokens) -> Credentials:
    config = _client_config()['web']
    return Credentials(
        token=tokens.get('token'),
        refresh_token=tokens.get('refresh_token'),
        token_uri=TOKEN_URI,
        client_id=config['client_id'],
        client_secret=config['client_secret'],
        scopes=tokens.get('scopes') or SCOPES,
    )


# Session store

def create_session(tokens, user_info=None) -> DriveSession:
    ttl = timedelta(hours=current_app.config.get('DRIVE_SESSION_TTL_HOURS', 24))
    session = DriveSession(
        tokens=tokens,
        user_info=user_info,
        expires_at=datetime.utcnow() + ttl,
    )
    db.session.add(session)
    db.session.commit()
    return session


def get_session(session_id):
    """Return the live session, or None if it is unknown or expired (expired ones are removed)."""
    if not session_id:
        return None
    session = DriveSession.query.get(session_id)
    if session is None:
        return None
    if session.is_expired():
        db.session.delete(session)
        db.session.commit()
        return None
    return session


def require_session(session_id) -> DriveSession:
    session = get_session(session_id)
    if session is None:
        raise DriveSessionNotFound(f'No active Drive session {session_id}')
    return session


def delete_session(session_id) -> bool:
    session = DriveSession.query.get(session_id)
    if session is None:
        return False
    db.session.delete(session)
    db.session.commit()
    return True


def purge_expired_sessions(now=None) -> int:
    now = now or datetime.utcnow()
    count = DriveSession.query.filter(DriveSession.expires_at <= now).delete()
    db.session.commit()
    return count


class DriveClient:
    """Thin wrapper over the Drive v3 API for one user's credentials."""

    def __init__(self, tokens):
        self.credentials = credentials_from_tokens(tokens)
        self.drive = build('drive', 'v3', credentials=self.credentials, cache_discovery=False)

    def get_user_info(self) -> dict:
        oauth2 = build('oauth2', 'v2', credentials=self.credentials, cache_discovery=False)
        return oauth2.userinfo().get().execute()

    def ensure_folder(self) -> str:
        name = current_app.config.get('DRIVE_FOLDER_NAME', 'OpportunityHub')
        res = self.drive.files().list(
            q=f"name='{name}' and mimeType='{FOLDER_MIME_TYPE}' and trashed=false",
            fields='files(id, name)',
        ).execute()
        files = res.get('files', [])
        if files:
            return files[0]['id']

        folder = self.drive.files().create(
            body={'name': name, 'mimeType': FOLDER_MIME_TYPE},
            fields='id',
        ).execute()
        return folder['id']

    def upload_csv(self, file_path, filename, folder_id=None) -> dict:
        if not os.path.exists(file_path):
            raise FileNotFoundError(f'File not found: {file_path}')

        folder_id = folder_id or self.ensure_folder()
        media = MediaFileUpload(file_path, mimetype='text/csv')
        file = self.drive.files().create(
            body={'name': filename, 'parents': [folder_id]},
            media_body=media,
            fields='id, name, webViewLink, webContentLink',
        ).execute()

        try:
            self.drive.permissions().create(
                fileId=file['id'],
                body={'role': 'reader', 'type': 'anyone'},
            ).execute()
        except Exception as e:
            # Some accounts forbid public sharing; the upload itself succeeded
            logger.warning(f"Could not set sharing permission on {file['id']}: {e}")

        return {
            'fileId': file['id'],
            'fileName': file.get('name'),
            'viewLink': file.get('webViewLink'),
            'downloadLink': file.get('webContentLink'),
        }

    def list_files(self, folder_id=None) -> list:
        folder_id = folder_id or self.ensure_folder()
        res = self.drive.files().list(
            q=f"'{folder_id}' in parents and trashed=false",
            fields='files(id, name, createdTime, size, webViewLink)',
            orderBy='createdTime desc',
        ).execute()
        return res.get('files', [])


def upload_export(session_id, file_path, filename) -> dict:
    session = require_session(session_id)
    return DriveClient(session.tokens).upload_csv(file_path, filename)
