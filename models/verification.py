from models import db
from datetime import datetime


# --- Phone verification issued by the OTP provider ---
class PhoneVerification(db.Model):
    __tablename__ = "phone_verification"

    id = db.Column(db.String(32), primary_key=True)           # confirmation handle
    phone = db.Column(db.String(15), index=True, nullable=False)
    code = db.Column(db.String(6), nullable=False)
    sent_at = db.Column(db.DateTime, default=datetime.utcnow)
    attempts = db.Column(db.Integer, default=0)
    status = db.Column(db.String(20), default="pending")      # pending, verified, invalidated

    def __repr__(self):
        return f"<PhoneVerification phone={self.phone} status={self.status}>"


# --- Signup step machine persisted between requests ---
class SignupSession(db.Model):
    __tablename__ = "signup_session"

    id = db.Column(db.String(32), primary_key=True)
    state = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
