import logging
from urllib.parse import urlparse

from flask import Blueprint, jsonify, request

from academy.decorators import auth_required, get_session, get_student
from academy.errors import NotFoundError, TransportError, ValidationError
from academy.forms import LoginForm
from academy.roles import capabilities_for, to_role

logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__, url_prefix='/auth')


def is_safe_url(target):
    if not target:
        return False
    ref_url = urlparse(request.host_url)
    test_url = urlparse(target)
    return test_url.scheme in ('', 'http', 'https') and test_url.netloc in ('', ref_url.netloc)


@bp.route('/login', methods=['GET'])
def login_page():
    """Where the access guard sends anonymous requests."""
    next_page = request.args.get('next')
    return jsonify({
        'error': 'Login required.',
        'next': next_page if is_safe_url(next_page) else None,
    }), 401


@bp.route('/login', methods=['POST'])
def login():
    form = LoginForm()
    if not form.validate():
        raise ValidationError(form.first_error())

    session_store = get_session()
    session_store.login(form.email.data, form.password.data, form.verification_code.data or None)
    if not session_store.is_authenticated:
        raise TransportError()

    logger.info('User %s logged in', session_store.user['id'])
    next_page = request.args.get('next')
    return jsonify({
        **session_store.to_dict(),
        'next': next_page if is_safe_url(next_page) else '/',
    })


@bp.route('/logout', methods=['POST'])
def logout():
    get_session().logout()
    return jsonify({'message': 'Logged out.'})


@bp.route('/me', methods=['GET'])
def me():
    session_store = get_session()
    session_store.fetch_current_user()
    return jsonify(session_store.to_dict())


@bp.route('/capabilities', methods=['GET'])
def capabilities():
    user = get_session().current_user
    return jsonify({'role': user.role, 'capabilities': capabilities_for(user.role)})


@bp.route('/student', methods=['GET'])
@auth_required
def student():
    record = get_student()
    return jsonify({
        'student': record.to_dict() if record else None,
        'status': record.status.value if record else None,
    })


@bp.route('/onboarding', methods=['POST'])
@auth_required
def complete_onboarding():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    session_store = get_session()
    session_store.complete_onboarding(data)
    return jsonify(session_store.to_dict())


@bp.route('/dev/role', methods=['POST'])
def switch_role():
    session_store = get_session()
    if not session_store.strategy.dev_mode:
        raise NotFoundError()
    data = request.get_json(silent=True)
    role = to_role(data.get('role')) if isinstance(data, dict) else None
    if role is None:
        raise ValidationError('Role must be one of student, teacher, admin.')
    session_store.switch_role(role)
    logger.info('Switched to mock %s', role.value)
    return jsonify(session_store.to_dict())
