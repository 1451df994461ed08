from flask import Blueprint, jsonify, request, current_app
from flask_login import current_user, login_required

from charades.services.games import lifecycle, turns
from charades.services.games.errors import GameError


games = Blueprint('games', __name__)


@games.app_errorhandler(GameError)
def handle_game_error(exc):
    current_app.logger.info(f"[reject] path={request.path} code={exc.code} message={exc}")
    return jsonify({'error': str(exc), 'code': exc.code}), exc.status_code


def _viewer_id():
    return current_user.id if current_user.is_authenticated else None


@games.route('', methods=['POST'])
@login_required
def create_game():
    data = request.get_json(silent=True) or {}
    created = lifecycle.create_game(
        current_user.id,
        name=data.get('name'),
        team1_name=data.get('team1_name'),
        team2_name=data.get('team2_name'),
        turn_duration=data.get('turn_duration'),
        winning_score=data.get('winning_score'),
    )
    return jsonify(created), 201


@games.route('', methods=['GET'])
@login_required
def list_games():
    return jsonify(lifecycle.list_games(current_user.id))


@games.route('/<string:id_or_code>', methods=['GET'])
def get_game(id_or_code):
    return jsonify(lifecycle.get_game(id_or_code, _viewer_id()))


@games.route('/<int:game_id>', methods=['DELETE'])
@login_required
def delete_game(game_id):
    return jsonify(lifecycle.delete_game(game_id, current_user.id))


@games.route('/<string:id_or_code>/join', methods=['POST'])
@login_required
def join_team(id_or_code):
    data = request.get_json(silent=True) or {}
    return jsonify(lifecycle.join_team(id_or_code, current_user.id, data.get('team')))


@games.route('/<int:game_id>/start', methods=['POST'])
@login_required
def start_game(game_id):
    return jsonify(lifecycle.start_game(game_id, current_user.id))


@games.route('/<int:game_id>/start-turn', methods=['POST'])
@login_required
def start_turn(game_id):
    return jsonify(turns.start_turn(game_id, current_user.id))


@games.route('/<int:game_id>/correct', methods=['POST'])
@login_required
def mark_correct(game_id):
    return jsonify(turns.mark_correct(game_id, current_user.id))


@games.route('/<int:game_id>/next-word', methods=['POST'])
@login_required
def next_word(game_id):
    return jsonify(turns.next_word(game_id, current_user.id))


@games.route('/<int:game_id>/skip', methods=['POST'])
@login_required
def skip_word(game_id):
    return jsonify(turns.skip_word(game_id, current_user.id))


@games.route('/<int:game_id>/end-turn', methods=['POST'])
@login_required
def end_turn(game_id):
    data = request.get_json(silent=True) or {}
    revoke_points = data.get('revoke_points', data.get('revokePoints', 0))
    return jsonify(turns.end_turn(game_id, current_user.id, revoke_points))


@games.route('/<int:game_id>/end', methods=['POST'])
@login_required
def end_game(game_id):
    return jsonify(lifecycle.end_game(game_id, current_user.id))
