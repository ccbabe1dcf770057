import uuid
from datetime import datetime
from enum import Enum
from opportunityhub import db


class Category(Enum):
    HACKATHON = "hackathon"
    JOB = "job"
    COMPETITION = "competition"
    CERTIFICATION = "certification"

    @classmethod
    def values(cls):
        return [choice.value for choice in cls]


class RecordStatus(Enum):
    VERIFIED = "verified"
    PENDING = "pending"
    REJECTED = "rejected"

    @classmethod
    def values(cls):
        return [choice.value for choice in cls]


def _new_id():
    return str(uuid.uuid4())


class DataSource(db.Model):
    __tablename__ = 'data_source'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(128), nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    url = db.Column(db.String(512))
    category = db.Column(db.String(32), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'url': self.url,
            'type': self.category,
            'active': bool(self.is_active),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<DataSource {self.name} ({self.category})>'


class CollectedItem(db.Model):
    __tablename__ = 'collected_item'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(128), nullable=False, index=True)
    title = db.Column(db.String(256), index=True)
    category = db.Column(db.String(32), nullable=False, index=True)
    organization = db.Column(db.String(256))
    url = db.Column(db.String(1024), index=True)
    description = db.Column(db.Text)
    prize = db.Column(db.String(256))
    location = db.Column(db.String(256))
    deadline_text = db.Column(db.String(256))
    deadline = db.Column(db.Date)
    quality_score = db.Column(db.Integer, default=0)
    status = db.Column(db.String(32), default=RecordStatus.PENDING.value, index=True)
    collected_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'title': self.title,
            'category': self.category,
            'organization': self.organization,
            'url': self.url,
            'description': self.description,
            'prize': self.prize,
            'location': self.location,
            'deadline': self.deadline.isoformat() if self.deadline else None,
            'deadlineText': self.deadline_text,
            'qualityScore': self.quality_score,
            'status': self.status,
            'collectedAt': self.collected_at.isoformat() if self.collected_at else None,
        }

    def __repr__(self):
        return f'<CollectedItem {(self.title or "")[:50]}>'


class CollectionSchedule(db.Model):
    __tablename__ = 'collection_schedule'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(128), unique=True, nullable=False, index=True)
    frequency = db.Column(db.String(16), default='daily')
    time = db.Column(db.String(5), nullable=False)  # HH:MM
    timezone = db.Column(db.String(64), default='UTC')
    day_of_week = db.Column(db.Integer)  # 0=Monday, weekly only
    enabled = db.Column(db.Boolean, default=True)
    last_run = db.Column(db.DateTime)
    next_run = db.Column(db.DateTime, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'frequency': self.frequency,
            'time': self.time,
            'timezone': self.timezone,
            'dayOfWeek': self.day_of_week,
            'enabled': bool(self.enabled),
            'lastRun': self.last_run.isoformat() if self.last_run else None,
            'nextRun': self.next_run.isoformat() if self.next_run else None,
        }

    def __repr__(self):
        return f'<CollectionSchedule {self.user_id} {self.frequency}@{self.time}>'


class ExportHistory(db.Model):
    __tablename__ = 'export_history'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(128), nullable=False, index=True)
    filename = db.Column(db.String(256), nullable=False)
    format = db.Column(db.String(16), default='csv')
    items_count = db.Column(db.Integer, default=0)
    status = db.Column(db.String(32), default='pending')
    local_path = db.Column(db.String(1024))
    drive_file_id = db.Column(db.String(128))
    drive_view_link = db.Column(db.String(1024))
    drive_download_link = db.Column(db.String(1024))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'filename': self.filename,
            'format': self.format,
            'itemsCount': self.items_count,
            'status': self.status,
            'driveFileId': self.drive_file_id,
            'driveViewLink': self.drive_view_link,
            'driveDownloadLink': self.drive_download_link,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<ExportHistory {self.filename}>'


class DriveSession(db.Model):
    __tablename__ = 'drive_session'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    tokens = db.Column(db.JSON, nullable=False)
    user_info = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def is_expired(self, now=None):
        return (now or datetime.utcnow()) >= self.expires_at

    def __repr__(self):
        return f'<DriveSession {self.id}>'
