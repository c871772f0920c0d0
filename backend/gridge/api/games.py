from flask import Blueprint, jsonify, request, current_app
from gridge import get_lifecycle, socketio
from gridge.models import STATUSES
from gridge.services.games.errors import GameError


games = Blueprint('games', __name__)


def _int_field(data, key):
    """Integer value of data[key], or None when missing or not an integer."""
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _emit_state(game):
    socketio.emit(
        'state_update',
        {'game_id': game['id'], 'status': game['status']},
        to=f"game:{game['id']}",
        namespace='/ws',
    )


@games.app_errorhandler(GameError)
def handle_game_error(exc):
    current_app.logger.info(f"[rejected] {request.method} {request.path} code={exc.code} error={exc.message}")
    return jsonify(exc.to_dict()), exc.http_status


@games.route('', methods=['POST'])
def create_game():
    data = request.get_json(silent=True) or {}
    player_id = _int_field(data, 'player_id')
    if player_id is None:
        return jsonify({'error': 'player_id is required and must be a number'}), 400

    game = get_lifecycle().create_session(player_id)
    return jsonify(game), 201


@games.route('', methods=['GET'])
def list_games():
    status = request.args.get('status', 'waiting')
    if status not in STATUSES:
        return jsonify({'error': f"status must be one of {', '.join(STATUSES)}"}), 400
    return jsonify(get_lifecycle().list_sessions(status))


@games.route('/<string:game_id>', methods=['GET'])
def get_game_state(game_id):
    return jsonify(get_lifecycle().get_session(game_id))


@games.route('/<string:game_id>/moves', methods=['GET'])
def get_moves(game_id):
    return jsonify(get_lifecycle().list_moves(game_id))


@games.route('/<string:game_id>/join', methods=['POST'])
def join_game(game_id):
    data = request.get_json(silent=True) or {}
    player_id = _int_field(data, 'player_id')
    if player_id is None:
        return jsonify({'error': 'player_id is required and must be a number'}), 400

    game = get_lifecycle().join_session(game_id, player_id)
    _emit_state(game)
    return jsonify(game)


@games.route('/<string:game_id>/move', methods=['POST'])
def make_move(game_id):
    data = request.get_json(silent=True) or {}
    player_id = _int_field(data, 'player_id')
    if player_id is None:
        return jsonify({'error': 'player_id is required and must be a number'}), 400
    row = _int_field(data, 'row')
    col = _int_field(data, 'col')
    if row is None or col is None:
        return jsonify({'error': 'row and col are required and must be numbers'}), 400

    game = get_lifecycle().make_move(game_id, player_id, row, col)
    _emit_state(game)
    return jsonify(game)
