import pytest

from gridge import db
from gridge.models import Player
from gridge.services.games import ranking


def _player(name, wins=0, moves_in_wins=0):
    player = Player(name=name, wins=wins, moves_in_wins=moves_in_wins)
    db.session.add(player)
    db.session.commit()
    return player


def test_empty_when_nobody_has_won(lifecycle, alice, bob):
    assert lifecycle.leaderboard('wins') == []
    assert lifecycle.leaderboard('efficiency') == []


def test_wins_ordering(flask_app):
    _player('ann', wins=2, moves_in_wins=12)
    _player('ben', wins=5, moves_in_wins=35)
    _player('cid', wins=0)
    _player('dee', wins=3, moves_in_wins=15)
    _player('eve', wins=1, moves_in_wins=5)

    entries = ranking.leaderboard(db.session, 'wins', limit=3)
    assert [(e.rank, e.name, e.value) for e in entries] == [
        (1, 'ben', 5),
        (2, 'dee', 3),
        (3, 'ann', 2),
    ]


def test_efficiency_ordering_rewards_fewer_moves_per_win(flask_app):
    _player('ann', wins=2, moves_in_wins=12)   # 6.0
    _player('ben', wins=5, moves_in_wins=35)   # 7.0
    _player('dee', wins=3, moves_in_wins=16)   # 5.33
    _player('eve', wins=1, moves_in_wins=5)    # 5.0
    _player('fay', wins=0)

    entries = ranking.leaderboard(db.session, 'efficiency', limit=10)
    assert [(e.rank, e.name, e.value) for e in entries] == [
        (1, 'eve', 5.0),
        (2, 'dee', 5.33),
        (3, 'ann', 6.0),
        (4, 'ben', 7.0),
    ]


def test_ties_keep_registration_order(flask_app):
    first = _player('zed', wins=2, moves_in_wins=10)
    second = _player('amy', wins=2, moves_in_wins=10)

    for order_by in ranking.ORDERINGS:
        entries = ranking.leaderboard(db.session, order_by, limit=3)
        assert [e.player_id for e in entries] == [first.id, second.id]
        assert ranking.leaderboard(db.session, order_by, limit=3) == entries


def test_scores_are_monotone(flask_app):
    for i, (wins, moves) in enumerate([(1, 9), (4, 20), (2, 7), (3, 27), (6, 33), (2, 14)]):
        _player(f'p{i}', wins=wins, moves_in_wins=moves)

    by_wins = [e.value for e in ranking.leaderboard(db.session, 'wins', limit=10)]
    by_efficiency = [e.value for e in ranking.leaderboard(db.session, 'efficiency', limit=10)]
    assert by_wins == sorted(by_wins, reverse=True)
    assert by_efficiency == sorted(by_efficiency)
    assert len(by_wins) == len(by_efficiency) == 6


def test_limit_comes_from_config(lifecycle, flask_app):
    for i in range(5):
        _player(f'w{i}', wins=i + 1, moves_in_wins=5 * (i + 1))
    assert len(lifecycle.leaderboard('wins')) == flask_app.config['LEADERBOARD_LIMIT'] == 3
    assert len(lifecycle.leaderboard('wins', limit=5)) == 5


def test_unknown_ordering_is_rejected(flask_app):
    with pytest.raises(ValueError):
        ranking.leaderboard(db.session, 'losses')


def test_leaderboard_reflects_played_games(lifecycle, alice, bob):
    game = lifecycle.create_session(alice['id'])
    lifecycle.join_session(game['id'], bob['id'])
    for player, row, col in [(alice, 0, 0), (bob, 1, 1), (alice, 0, 1), (bob, 1, 0), (alice, 0, 2)]:
        lifecycle.make_move(game['id'], player['id'], row, col)

    assert lifecycle.leaderboard('wins') == [
        {'rank': 1, 'player_id': alice['id'], 'name': 'Alice', 'value': 1},
    ]
    assert lifecycle.leaderboard('efficiency') == [
        {'rank': 1, 'player_id': alice['id'], 'name': 'Alice', 'value': 5.0},
    ]
