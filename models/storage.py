from models import db
from datetime import datetime


class StoredBlob(db.Model):
    """String blob addressed by key, the server-side twin of browser local storage."""

    __tablename__ = "stored_blob"

    key = db.Column(db.String(200), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
