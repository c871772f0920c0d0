from flask import Blueprint, jsonify, request
from gridge import get_lifecycle
from gridge.services.games.ranking import ORDERINGS

players = Blueprint('players', __name__)


@players.route('/players', methods=['POST'])
def register_player():
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        return jsonify({'error': 'Name is required and must be a non-empty string'}), 400

    player = get_lifecycle().register_player(name.strip())
    return jsonify({'id': player['id'], 'name': player['name']}), 201


@players.route('/players/<int:player_id>', methods=['GET'])
def get_player(player_id):
    return jsonify(get_lifecycle().get_player(player_id))


@players.route('/players/<int:player_id>/games', methods=['GET'])
def get_player_games(player_id):
    return jsonify(get_lifecycle().list_player_sessions(player_id))


@players.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    by = request.args.get('by')
    if by not in ORDERINGS:
        return jsonify({'error': 'Query parameter "by" is required and must be "wins" or "efficiency"'}), 400
    limit = request.args.get('limit', type=int)
    if limit is not None and limit < 1:
        return jsonify({'error': 'limit must be a positive integer'}), 400
    return jsonify(get_lifecycle().leaderboard(by, limit))
