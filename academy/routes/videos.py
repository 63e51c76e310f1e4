from flask import Blueprint, current_app, jsonify, request

from academy.decorators import get_current_user
from academy.errors import ValidationError
from academy.forms import VideoForm, VideoUpdateForm, VideoUploadForm

bp = Blueprint('videos', __name__, url_prefix='/api/videos')


def get_video_store():
    return current_app.extensions['academy_videos']


def _author():
    """The signed-in user as video owner, if there is one."""
    user = get_current_user()
    if not user:
        return None
    return {'id': user.id, 'name': user.name}


@bp.route('', methods=['GET'])
def list_videos():
    return jsonify({'videos': get_video_store().list()})


@bp.route('/<video_id>', methods=['GET'])
def get_video(video_id):
    return jsonify({'video': get_video_store().get(video_id)})


@bp.route('', methods=['POST'])
def create_video():
    form = VideoForm()
    if not form.validate():
        raise ValidationError(form.first_error())
    video = get_video_store().create(form.provided_data(), teacher=_author())
    return jsonify({'video': video}), 201


@bp.route('/upload', methods=['POST'])
def upload_video():
    form = VideoUploadForm()
    if not form.validate():
        raise ValidationError(form.first_error())
    video = get_video_store().upload_create(
        {
            'title': form.title.data,
            'description': form.description.data,
            'duration': form.duration.data,
        },
        form.video.data,
        form.thumbnail.data,
        teacher=_author(),
    )
    return jsonify({'video': video}), 201


@bp.route('/<video_id>', methods=['PUT'])
def update_video(video_id):
    store = get_video_store()
    # unknown ids are a 404 before the body is looked at
    store.get(video_id)

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object.')
    form = VideoUpdateForm()
    if not form.validate():
        raise ValidationError(form.first_error())
    return jsonify({'video': store.update(video_id, form.provided_data())})


@bp.route('/<video_id>', methods=['DELETE'])
def delete_video(video_id):
    get_video_store().delete(video_id)
    return jsonify({'message': 'Video deleted.'})
