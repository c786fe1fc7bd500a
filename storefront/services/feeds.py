"""Live queries over SQLAlchemy models.

A ``LiveQuery`` pushes its complete result set to every subscriber once on
subscription and again after each committed transaction that wrote one of
the watched models. Subscribers always receive the full list, never a diff.
"""
import logging
import weakref
from typing import Callable, List

from flask import current_app, has_app_context
from sqlalchemy import event, select
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class LiveQuery:
    def __init__(self, hub, model, order_by=(), watch=None, **filters):
        self._hub = hub
        self.model = model
        self.order_by = order_by if isinstance(order_by, (list, tuple)) else (order_by,)
        self.watch = tuple(watch or (model,))
        self.filters = filters
        self._subscribers: List[Callable[[list], None]] = []

    def fetch(self) -> list:
        # after_commit forbids SQL on the committing session, so read through a fresh one
        stmt = select(self.model).filter_by(**self.filters)
        if self.order_by:
            stmt = stmt.order_by(*self.order_by)
        with Session(self._hub.db.engine) as session:
            return [row.to_dict() for row in session.scalars(stmt)]

    def subscribe(self, callback: Callable[[list], None]) -> Callable[[], None]:
        self._subscribers.append(callback)
        callback(self.fetch())

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def active(self) -> bool:
        return bool(self._subscribers)

    def push(self) -> None:
        rows = self.fetch()
        for callback in list(self._subscribers):
            try:
                callback(rows)
            except Exception:
                logger.exception("Live query subscriber failed for %s", self.model.__name__)


class FeedHub:
    """Live queries of one application."""

    def __init__(self, app, db):
        self.app = app
        self.db = db
        self._queries: List[LiveQuery] = []

    def live_query(self, model, order_by=(), watch=None, **filters) -> LiveQuery:
        query = LiveQuery(self, model, order_by=order_by, watch=watch, **filters)
        self._queries.append(query)
        return query

    def dispatch(self, touched) -> None:
        for query in self._queries:
            if query.active and any(issubclass(model, query.watch) for model in touched):
                query.push()


# session events are hooked once per db; each commit goes to the hub of the current app
_TOUCHED_KEY = "feeds.touched"
_hooked = weakref.WeakSet()


def _track(session, flush_context):
    touched = session.info.setdefault(_TOUCHED_KEY, set())
    for obj in list(session.new) + list(session.dirty) + list(session.deleted):
        touched.add(type(obj))


def _forget(session):
    session.info.pop(_TOUCHED_KEY, None)


def _dispatch(session):
    touched = session.info.pop(_TOUCHED_KEY, set())
    if not touched or not has_app_context():
        return
    hub = current_app.extensions.get("feeds")
    if hub is not None:
        hub.dispatch(touched)


def install_listeners(db) -> bool:
    """Hook the session events of ``db``; False when already hooked."""
    if db in _hooked:
        return False
    event.listen(db.session, "after_flush", _track)
    event.listen(db.session, "after_commit", _dispatch)
    event.listen(db.session, "after_rollback", _forget)
    _hooked.add(db)
    return True


def init_feeds(app, db) -> FeedHub:
    install_listeners(db)
    hub = FeedHub(app, db)
    app.extensions["feeds"] = hub
    return hub
