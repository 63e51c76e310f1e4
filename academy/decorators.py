from collections import namedtuple
from functools import wraps

from flask import current_app, g, jsonify, redirect, request, url_for

from academy.persistence import get_storage
from academy.session import SessionStore, LOADING
from academy.students import StudentStatus, map_student_response

RENDER = 'render'
REDIRECT = 'redirect'
PENDING = 'pending'

LOGIN_PATH = '/auth/login'

# ``next`` is the originally requested path, kept for the post-login return
AccessDecision = namedtuple('AccessDecision', ['outcome', 'target', 'next'])


def evaluate_access(session_store, path, allowed_roles=None, fallback='/'):
    """Decide whether a request for ``path`` may proceed.

    Authentication is checked before authorization.  While the session is
    still loading the decision is PENDING rather than a redirect.
    """
    if session_store.status == LOADING:
        return AccessDecision(PENDING, None, None)
    if not session_store.is_authenticated:
        return AccessDecision(REDIRECT, LOGIN_PATH, path)
    if allowed_roles is not None:
        role = (session_store.user or {}).get('role')
        if role not in {getattr(r, 'value', r) for r in allowed_roles}:
            return AccessDecision(REDIRECT, fallback, None)
    return AccessDecision(RENDER, None, None)


def load_session():
    """Build this request's SessionStore into g."""
    if hasattr(g, 'session_store'):
        return g.session_store
    g.session_store = SessionStore(
        get_storage(),
        current_app.extensions['academy_identity_strategy'],
        current_app.extensions['academy_identity_client'],
    )
    return g.session_store


def get_session():
    if not hasattr(g, 'session_store'):
        load_session()
    return g.session_store


def get_current_user():
    return get_session().current_user


def _settled_decision(allowed_roles, fallback):
    session_store = get_session()
    path = request.full_path.rstrip('?')
    decision = evaluate_access(session_store, path, allowed_roles, fallback)
    if decision.outcome == PENDING or decision.target == LOGIN_PATH:
        # settle the session once before sending anyone to the login page
        session_store.fetch_current_user()
        decision = evaluate_access(session_store, path, allowed_roles, fallback)
    return decision


def _redirect_for(decision):
    if decision.target == LOGIN_PATH:
        return redirect(url_for('auth.login_page', next=decision.next))
    return redirect(decision.target)


def auth_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        decision = _settled_decision(None, '/')
        if decision.outcome != RENDER:
            return _redirect_for(decision)
        g.current_user = get_current_user()
        return f(*args, **kwargs)
    return decorated


def role_required(*roles, redirect_to='/'):
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            decision = _settled_decision(roles, redirect_to)
            if decision.outcome != RENDER:
                return _redirect_for(decision)
            g.current_user = get_current_user()
            return f(*args, **kwargs)
        return decorated
    return decorator


def get_student():
    """Fetch the signed-in student's record once per request.

    Returns None for non-students and for users the service has no
    student record for.
    """
    if not hasattr(g, 'student'):
        session_store = get_session()
        student = None
        if session_store.current_user.is_student():
            client = current_app.extensions['academy_identity_client']
            student = map_student_response(client.fetch_student(session_store.token))
        g.student = student
    return g.student


def student_status_required(*statuses):
    allowed = {StudentStatus(s) for s in statuses}

    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            if not get_current_user().is_student():
                return f(*args, **kwargs)
            student = get_student()
            status = student.status if student else StudentStatus.INCOMPLETE
            if status not in allowed:
                return jsonify({
                    'error': 'Your student application does not allow this yet.',
                    'status': status.value,
                }), 403
            return f(*args, **kwargs)
        return auth_required(decorated)
    return decorator
