import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import db
from extensions import limiter


@pytest.fixture(scope='session')
def app_instance():
    os.environ.setdefault('APP_ENV', 'testing')
    os.environ.setdefault('TEST_DATABASE_URL', 'sqlite:///:memory:')
    from storefront import create_app
    app = create_app()
    app.config.update(
        TESTING=True,
        SQLALCHEMY_TRACK_MODIFICATIONS=False
    )
    return app


@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        limiter.reset()
        yield app_instance
        app_instance.extensions["admin_dashboard"].stop()
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


def obtain_token(client, username="buyer", role="user", **extra):
    resp = client.post("/__auth/login_stub", json={"username": username, "role": role, **extra})
    return resp.get_json()["data"]


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def load_app(monkeypatch, **env):
    """Build a fresh app after applying ``env`` to the process environment."""
    import importlib
    monkeypatch.setenv('APP_ENV', 'testing')
    for key, value in env.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    import storefront.config as config_module
    importlib.reload(config_module)
    from storefront import create_app
    return create_app(config_module.get_config_class())
