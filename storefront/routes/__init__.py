from .auth import auth_bp
from .signup import signup_bp
from .products import products_bp
from .cart import cart_bp
from .profile import profile_bp
from .admin import admin_bp


__all__ = [
    'auth_bp',
    'signup_bp',
    'products_bp',
    'cart_bp',
    'profile_bp',
    'admin_bp',
]
