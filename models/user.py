# --- models/user.py ---
from models import db
from datetime import datetime
import uuid


def _uid():
    return uuid.uuid4().hex


# --- Credential record of the auth provider ---
class Account(db.Model):
    __tablename__ = "account"

    uid = db.Column(db.String(32), primary_key=True, default=_uid)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    disabled = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Account uid={self.uid}>"


# --- User Profile Model ---
class UserProfile(db.Model):
    __tablename__ = "user_profile"

    uid = db.Column(db.String(32), db.ForeignKey("account.uid"), primary_key=True)
    email = db.Column(db.String(255), default="")
    username = db.Column(db.String(50), unique=True, nullable=True)
    full_name = db.Column(db.String(100), nullable=True)
    phone_number = db.Column(db.String(15), index=True, nullable=True)
    phone_verified = db.Column(db.Boolean, default=False)
    email_verified = db.Column(db.Boolean, default=False)
    role = db.Column(db.String(20), default="user")  # user, admin
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    addresses = db.relationship(
        "Address",
        backref="owner",
        order_by="Address.position",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def to_dict(self):
        return {
            "uid": self.uid,
            "email": self.email or "",
            "username": self.username,
            "full_name": self.full_name,
            "phone_number": self.phone_number,
            "phone_verified": bool(self.phone_verified),
            "email_verified": bool(self.email_verified),
            "addresses": [a.to_dict() for a in self.addresses],
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User uid={self.uid} role={self.role}>"


class Address(db.Model):
    __tablename__ = "address"

    id = db.Column(db.String(32), primary_key=True, default=_uid)
    user_id = db.Column(db.String(32), db.ForeignKey("user_profile.uid"), nullable=False)
    position = db.Column(db.Integer, default=0)
    label = db.Column(db.String(50), nullable=False)              # e.g. Home, Office
    full_name = db.Column(db.String(100), nullable=False)
    phone_number = db.Column(db.String(15), nullable=False)
    address_line1 = db.Column(db.String(255), nullable=False)
    address_line2 = db.Column(db.String(255), nullable=True)
    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(100), nullable=False)
    pincode = db.Column(db.String(10), nullable=False)
    is_default = db.Column(db.Boolean, default=False)

    def to_dict(self):
        return {
            "id": self.id,
            "label": self.label,
            "full_name": self.full_name,
            "phone_number": self.phone_number,
            "address_line1": self.address_line1,
            "address_line2": self.address_line2,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "is_default": bool(self.is_default),
        }
