from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Re-export common models for convenience
from .catalog import Product  # noqa: E402,F401
from .user import Account, UserProfile, Address  # noqa: E402,F401
from .order import Order, OrderItem  # noqa: E402,F401
from .verification import PhoneVerification, SignupSession  # noqa: E402,F401
from .storage import StoredBlob  # noqa: E402,F401
