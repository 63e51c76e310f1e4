"""
Per-client authentication session.

``SessionStore`` pairs the opaque auth token with the current user profile
and mirrors both into the client's storage.  How an empty or failed
"who am I" lookup is resolved is delegated to an identity strategy chosen
once at startup:

* ``RemoteIdentityStrategy`` (production) clears the session
* ``MockIdentityStrategy`` (development) installs a fixed mock user so the
  UI can be explored without the user service
"""

import logging

from academy.errors import AcademyError, AuthenticationError, NotFoundError
from academy.roles import Role, to_role
from academy.users import CurrentUser, map_user_response, mock_user

logger = logging.getLogger(__name__)

TOKEN_KEY = 'token'
USER_KEY = 'user'
ONBOARDING_COMPLETED_KEY = 'onboarding.completed'
ONBOARDING_DATA_KEY = 'onboarding.data'

DEV_TOKEN_PREFIX = 'dev-token-'

LOADING = 'loading'
AUTHENTICATED = 'authenticated'
UNAUTHENTICATED = 'unauthenticated'


class RemoteIdentityStrategy:
    dev_mode = False

    def on_missing_token(self, store):
        store.clear()

    def on_fetch_failure(self, store, error):
        store.clear()


class MockIdentityStrategy:
    dev_mode = True

    def on_missing_token(self, store):
        self.install(store, Role.STUDENT)

    def on_fetch_failure(self, store, error):
        self.install(store, self.role_from_token(store.token))

    @staticmethod
    def role_from_token(token):
        if token and token.startswith(DEV_TOKEN_PREFIX):
            return to_role(token[len(DEV_TOKEN_PREFIX):]) or Role.STUDENT
        return Role.STUDENT

    @staticmethod
    def install(store, role):
        role = to_role(role) or Role.STUDENT
        store.set_token(f'{DEV_TOKEN_PREFIX}{role.value}')
        store.set_user(mock_user(role))


def build_strategy(dev_mode):
    return MockIdentityStrategy() if dev_mode else RemoteIdentityStrategy()


class SessionStore:
    def __init__(self, storage, strategy, identity_client=None):
        self.storage = storage
        self.strategy = strategy
        self.identity_client = identity_client
        self.token = storage.get(TOKEN_KEY) or ''
        self.user = storage.get(USER_KEY)
        self.is_loading = False

    def set_token(self, token):
        self.token = token or ''
        if self.token:
            self.storage.set(TOKEN_KEY, self.token)
        else:
            self.storage.remove(TOKEN_KEY)

    def set_user(self, user):
        self.user = user
        if user:
            self.storage.set(USER_KEY, user)
        else:
            self.storage.remove(USER_KEY)

    def set_loading(self, loading):
        self.is_loading = bool(loading)

    def clear(self):
        self.token = ''
        self.user = None
        self.is_loading = False
        self.storage.remove(TOKEN_KEY)
        self.storage.remove(USER_KEY)

    @property
    def status(self):
        if self.is_loading:
            return LOADING
        if self.token and self.user:
            return AUTHENTICATED
        return UNAUTHENTICATED

    @property
    def is_authenticated(self):
        return self.status == AUTHENTICATED

    @property
    def current_user(self):
        return CurrentUser(self.user if self.is_authenticated else None)

    @property
    def has_completed_onboarding(self):
        if not self.user:
            return False
        return self.storage.get(ONBOARDING_COMPLETED_KEY) is True

    def complete_onboarding(self, data):
        self.storage.set(ONBOARDING_DATA_KEY, data)
        self.storage.set(ONBOARDING_COMPLETED_KEY, True)

    def fetch_current_user(self):
        """Resolve the stored token to a user profile.

        Overlapping calls are not coordinated; whichever finishes last wins.
        """
        token = self.storage.get(TOKEN_KEY)
        if not token:
            self.strategy.on_missing_token(self)
            return self.user

        if self.token != token:
            self.set_token(token)

        self.set_loading(True)
        try:
            if self.identity_client is None:
                raise AuthenticationError('No identity service configured.')
            user = map_user_response(self.identity_client.fetch_me(token))
            if user is None:
                raise AuthenticationError('Unrecognised user profile.')
            self.set_user(user)
        except AcademyError as e:
            logger.error('Failed to fetch user data: %s', e)
            self.strategy.on_fetch_failure(self, e)
        finally:
            self.set_loading(False)
        return self.user

    def login(self, email, password, verification_code=None):
        token = self.identity_client.login(email, password, verification_code)
        self.set_token(token)
        return self.fetch_current_user()

    def logout(self):
        self.clear()
        self.storage.remove(ONBOARDING_COMPLETED_KEY)
        self.storage.remove(ONBOARDING_DATA_KEY)

    def switch_role(self, role):
        """Development only: impersonate the mock user for ``role``."""
        if not self.strategy.dev_mode:
            raise NotFoundError()
        MockIdentityStrategy.install(self, role)
        return self.user

    def to_dict(self):
        return {
            'status': self.status,
            'user': self.user if self.is_authenticated else None,
            'isLoading': self.is_loading,
            'hasCompletedOnboarding': self.has_completed_onboarding,
        }
