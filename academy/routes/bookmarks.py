from flask import Blueprint, g, jsonify

from academy.bookmarks import BookmarkStore
from academy.decorators import auth_required
from academy.errors import ValidationError
from academy.forms import BookmarkForm, EnrollmentForm
from academy.persistence import get_storage

bp = Blueprint('bookmarks', __name__, url_prefix='/api')


def get_bookmarks():
    if not hasattr(g, 'bookmark_store'):
        g.bookmark_store = BookmarkStore(get_storage())
    return g.bookmark_store


def _item_from(form):
    if not form.validate():
        raise ValidationError(form.first_error())
    item = form.provided_data()
    item['id'] = str(item['id'])
    item.setdefault('slug', item['id'])
    return item


@bp.route('/bookmarks', methods=['GET'])
@auth_required
def list_bookmarks():
    return jsonify({'items': get_bookmarks().bookmarked_items})


@bp.route('/bookmarks', methods=['POST'])
@auth_required
def add_bookmark():
    store = get_bookmarks()
    added = store.add(_item_from(BookmarkForm()))
    return jsonify({'items': store.bookmarked_items}), 201 if added else 200


@bp.route('/bookmarks/<item_id>', methods=['GET'])
@auth_required
def bookmark_status(item_id):
    store = get_bookmarks()
    return jsonify({
        'id': item_id,
        'bookmarked': store.is_bookmarked(item_id),
        'enrolled': store.is_enrolled(item_id),
    })


@bp.route('/bookmarks/<item_id>', methods=['DELETE'])
@auth_required
def remove_bookmark(item_id):
    store = get_bookmarks()
    store.remove(item_id)
    return jsonify({'items': store.bookmarked_items})


@bp.route('/bookmarks', methods=['DELETE'])
@auth_required
def clear_bookmarks():
    get_bookmarks().clear_bookmarks()
    return jsonify({'items': []})


@bp.route('/enrollments', methods=['GET'])
@auth_required
def list_enrollments():
    return jsonify({'items': get_bookmarks().enrolled_items})


@bp.route('/enrollments', methods=['POST'])
@auth_required
def add_enrollment():
    store = get_bookmarks()
    added = store.add_enrollment(_item_from(EnrollmentForm()))
    return jsonify({'items': store.enrolled_items}), 201 if added else 200


@bp.route('/enrollments', methods=['DELETE'])
@auth_required
def clear_enrollments():
    get_bookmarks().clear_enrollments()
    return jsonify({'items': []})
