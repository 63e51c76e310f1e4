"""
Durable client-local key/value storage.

The session token, the cached user profile and the bookmark/enrollment
collections are persisted per browser client.  Three backends share one
small interface (``get``/``set``/``remove``):

* ``SessionStorage``  - the signed Flask session cookie, size-capped
* ``FirestoreStorage`` - one Firestore document per client
* ``MemoryStorage``   - a plain dict, used for tests and local runs
"""

import copy
import logging
import secrets
from datetime import datetime, timezone

from flask import current_app, session
from google.cloud.firestore_v1 import DELETE_FIELD

from academy.errors import StorageFullError
from academy.firebase_init import get_db

logger = logging.getLogger(__name__)

CLIENT_ID_KEY = 'client_id'
CLIENT_STATE_COLLECTION = 'client_state'

_MISSING = object()


class SessionStorage:
    """Stores values directly in the Flask session cookie.

    Browsers drop cookies over ``MAX_COOKIE_SIZE`` without telling anyone,
    so a write that would push the signed cookie past that size is undone
    and raises ``StorageFullError``.
    """

    # Path, HttpOnly, SameSite, Expires
    ATTRIBUTES_ALLOWANCE = 200

    def get(self, key, default=None):
        return copy.deepcopy(session.get(key, default))

    def set(self, key, value):
        previous = session.get(key, _MISSING)
        session[key] = copy.deepcopy(value)
        if self.cookie_size() > self.max_size():
            if previous is _MISSING:
                session.pop(key, None)
            else:
                session[key] = previous
            logger.warning('Session cookie would exceed %d bytes; refused to store %s', self.max_size(), key)
            raise StorageFullError()

    def remove(self, key):
        session.pop(key, None)

    def max_size(self):
        return current_app.config.get('MAX_COOKIE_SIZE', 4093) - self.ATTRIBUTES_ALLOWANCE

    def cookie_size(self):
        serializer = current_app.session_interface.get_signing_serializer(current_app)
        name = current_app.config.get('SESSION_COOKIE_NAME', 'session')
        return len(name) + 1 + len(serializer.dumps(dict(session)))


class MemoryStorage:
    def __init__(self, data=None):
        self._data = dict(data or {})

    def get(self, key, default=None):
        return copy.deepcopy(self._data.get(key, default))

    def set(self, key, value):
        self._data[key] = copy.deepcopy(value)

    def remove(self, key):
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)


class FirestoreStorage:
    """Keeps a client's values as fields of ``client_state/<client_id>``."""

    def __init__(self, client_id, db=None):
        self.client_id = client_id
        self._db = db

    def _doc_ref(self):
        db = self._db or get_db()
        return db.collection(CLIENT_STATE_COLLECTION).document(self.client_id)

    def get(self, key, default=None):
        doc = self._doc_ref().get()
        if not doc.exists:
            return default
        return doc.to_dict().get(key, default)

    def set(self, key, value):
        self._doc_ref().set({key: value, 'updated_at': datetime.now(timezone.utc)}, merge=True)

    def remove(self, key):
        doc_ref = self._doc_ref()
        if doc_ref.get().exists:
            doc_ref.update({key: DELETE_FIELD})


def get_client_id():
    """Return the browser client's id, issuing one on first use."""
    client_id = session.get(CLIENT_ID_KEY)
    if not client_id:
        client_id = secrets.token_hex(16)
        session[CLIENT_ID_KEY] = client_id
    return client_id


def get_storage():
    """Build the storage configured by ``STORAGE_BACKEND`` for this request."""
    backend = current_app.config.get('STORAGE_BACKEND', 'firestore')
    if backend == 'session':
        return SessionStorage()
    if backend == 'firestore':
        return FirestoreStorage(get_client_id())
    if backend == 'memory':
        clients = current_app.extensions.setdefault('academy_memory_storage', {})
        return clients.setdefault(get_client_id(), MemoryStorage())
    raise ValueError(f'Unknown STORAGE_BACKEND: {backend}')
