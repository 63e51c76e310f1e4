import logging

import requests as http_requests

from academy.errors import AuthenticationError, TransportError

logger = logging.getLogger(__name__)

LOGIN_PATH = '/user/login'
ME_PATH = '/api/user'
STUDENT_PATH = '/api/student'

# codes the user service uses on a 403 login response
_VERIFICATION_CODES = {
    'verification_required': AuthenticationError.VERIFICATION_REQUIRED,
    'code_required': AuthenticationError.VERIFICATION_REQUIRED,
    'verification_expired': AuthenticationError.VERIFICATION_EXPIRED,
    'code_expired': AuthenticationError.VERIFICATION_EXPIRED,
    'verification_invalid': AuthenticationError.VERIFICATION_INVALID,
    'invalid_code': AuthenticationError.VERIFICATION_INVALID,
}


def _json_or_empty(resp):
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _error_message(data, default):
    for key in ('error', 'message', 'detail'):
        if isinstance(data.get(key), str) and data[key]:
            return data[key]
    return default


def _verification_reason(data):
    for key in ('reason', 'error_type', 'code'):
        value = data.get(key)
        if isinstance(value, str) and value.lower() in _VERIFICATION_CODES:
            return _VERIFICATION_CODES[value.lower()]
    return AuthenticationError.VERIFICATION_REQUIRED


class IdentityClient:
    """Thin HTTP client for the external user service."""

    def __init__(self, base_url, timeout=15, http=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = http or http_requests.Session()

    def _request(self, method, path, token=None, **kwargs):
        headers = {'Accept': 'application/json'}
        if token:
            headers['Authorization'] = f'Bearer {token}'
        try:
            return self.http.request(
                method, f'{self.base_url}{path}',
                headers=headers, timeout=self.timeout, **kwargs
            )
        except http_requests.RequestException as e:
            logger.error('Request to %s failed: %s', path, e)
            raise TransportError() from e

    def login(self, email, password, verification_code=None):
        """Exchange credentials for a token.

        Raises AuthenticationError (401, or 403 with a verification reason)
        and TransportError for anything the user cannot fix by re-entering
        credentials.
        """
        payload = {'email': email, 'password': password}
        if verification_code:
            payload['verification_code'] = verification_code

        resp = self._request('POST', LOGIN_PATH, json=payload)
        data = _json_or_empty(resp)

        if resp.status_code == 403:
            raise AuthenticationError(
                _error_message(data, 'Verification code required.'),
                status_code=403,
                reason=_verification_reason(data),
            )
        if resp.status_code in (400, 401, 404):
            raise AuthenticationError(_error_message(data, AuthenticationError.default_message))
        if resp.status_code >= 400:
            logger.error('Login failed with status %s', resp.status_code)
            raise TransportError()

        token = data.get('token') or data.get('access_token')
        if not isinstance(token, str) or not token:
            logger.error('Login response carried no token')
            raise TransportError()
        return token

    def fetch_me(self, token):
        resp = self._request('GET', ME_PATH, token=token)
        if resp.status_code in (401, 403):
            raise AuthenticationError('Session expired.', status_code=resp.status_code)
        if resp.status_code != 200:
            logger.error('Fetching current user failed with status %s', resp.status_code)
            raise TransportError()
        data = _json_or_empty(resp)
        return data.get('user', data)

    def fetch_student(self, token):
        resp = self._request('GET', STUDENT_PATH, token=token)
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            logger.error('Fetching student record failed with status %s', resp.status_code)
            raise TransportError()
        return _json_or_empty(resp)
