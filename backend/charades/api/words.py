from functools import wraps

from flask import Blueprint, jsonify, request, current_app
from flask_login import current_user, login_required

from charades.services.games import words as word_pool
from charades.services.games.errors import InvalidArgument, NotAdmin


words = Blueprint('words', __name__)


def admin_required(view):
    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if not current_user.is_admin:
            raise NotAdmin()
        return view(*args, **kwargs)
    return wrapper


@words.route('', methods=['GET'])
@admin_required
def list_words():
    return jsonify(word_pool.list_words())


@words.route('', methods=['POST'])
@admin_required
def add_words():
    data = request.get_json(silent=True) or {}
    raw = data.get('words')
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not raw:
        raise InvalidArgument('words must be a non-empty list')
    added = word_pool.add_words(raw)
    current_app.logger.info(f"[words-add] added={len(added)} by={current_user.id}")
    return jsonify({'added': added}), 201


@words.route('/<string:word>', methods=['DELETE'])
@admin_required
def delete_word(word):
    word_pool.delete_word(word)
    current_app.logger.info(f"[words-delete] word={word} by={current_user.id}")
    return jsonify({'success': True})
