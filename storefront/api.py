from storefront.routes import (
    auth_bp,
    signup_bp,
    products_bp,
    cart_bp,
    profile_bp,
    admin_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(signup_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(admin_bp)
