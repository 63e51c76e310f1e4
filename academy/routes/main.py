from flask import Blueprint, current_app, jsonify

from academy.decorators import (auth_required, role_required, student_status_required,
                                get_current_user, get_student)
from academy.roles import capabilities_for
from academy.routes.bookmarks import get_bookmarks
from academy.routes.videos import get_video_store

bp = Blueprint('main', __name__)


@bp.route('/health')
def health():
    return jsonify({'status': 'ok'}), 200


@bp.route('/')
def index():
    user = get_current_user()
    return jsonify({
        'authenticated': bool(user),
        'user': user.to_dict() if user else None,
    })


@bp.route('/api/ping')
def ping():
    return jsonify({'message': current_app.config.get('PING_MESSAGE') or 'ping'})


@bp.route('/dashboard')
@auth_required
def dashboard():
    user = get_current_user()
    data = {
        'user': user.to_dict(),
        'capabilities': capabilities_for(user.role),
    }
    if user.is_student():
        # pending and rejected students are shown their application status
        student = get_student()
        data['studentStatus'] = student.status.value if student else None
    return jsonify(data)


@bp.route('/my-learning')
@student_status_required('APPROVED')
def my_learning():
    store = get_bookmarks()
    return jsonify({
        'bookmarks': store.bookmarked_items,
        'enrollments': store.enrolled_items,
    })


@bp.route('/teacher/videos')
@role_required('teacher', 'admin')
def teacher_videos():
    user = get_current_user()
    videos = get_video_store().list()
    if user.is_teacher():
        videos = [v for v in videos if v['teacherId'] == user.id]
    return jsonify({'videos': videos})


@bp.route('/admin')
@role_required('admin')
def admin():
    return jsonify({'videoCount': len(get_video_store())})
