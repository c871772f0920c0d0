"""Load simulation: register players and play many random games concurrently.

Run with ``flask simulate --players 4 --games 10``. Each game is driven by
its own worker thread with its own app context (and so its own database
session), the way concurrent requests would hit the engine.
"""

import random
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

import click
from flask import current_app
from flask.cli import with_appcontext

from gridge import get_lifecycle
from gridge.models import TERMINAL_STATUSES
from gridge.services.games.errors import GameError
from gridge.services.games.ranking import ORDER_EFFICIENCY, ORDER_WINS


def play_random_game(app, player_ids, rng):
    """Create, join and play one game to a terminal status with random moves."""
    with app.app_context():
        lifecycle = get_lifecycle()
        first, second = rng.sample(player_ids, 2)
        game = lifecycle.create_session(first)
        game = lifecycle.join_session(game['id'], second)
        while game['status'] not in TERMINAL_STATUSES:
            empty = [
                (r, c)
                for r, cells in enumerate(game['grid'])
                for c, value in enumerate(cells)
                if value == 0
            ]
            row, col = rng.choice(empty)
            game = lifecycle.make_move(game['id'], game['current_turn_player_id'], row, col)
        return game


@click.command('simulate')
@click.option('--players', 'num_players', default=4, show_default=True, type=click.IntRange(min=2),
              help='Number of players to register.')
@click.option('--games', 'num_games', default=10, show_default=True, type=click.IntRange(min=1),
              help='Number of games to play.')
@click.option('--workers', default=4, show_default=True, type=click.IntRange(min=1),
              help='Games played at the same time.')
@click.option('--seed', default=None, type=int, help='Seed for reproducible move choices.')
@with_appcontext
def simulate_command(num_players, num_games, workers, seed):
    """Simulate concurrent games and print the leaderboards."""
    app = current_app._get_current_object()
    lifecycle = get_lifecycle()
    stamp = int(time.time() * 1000)
    player_ids = [
        lifecycle.register_player(f'Player{i + 1}_{stamp}')['id']
        for i in range(num_players)
    ]
    click.echo(f'Registered {len(player_ids)} players')

    seeder = random.Random(seed)
    outcomes = {'won': 0, 'drawn': 0}
    failures = []
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(play_random_game, app, player_ids, random.Random(seeder.random())): n
            for n in range(1, num_games + 1)
        }
        for future in as_completed(futures):
            n = futures[future]
            try:
                game = future.result()
            except GameError as exc:
                failures.append((n, exc))
                continue
            outcomes[game['status']] += 1

    click.echo(f"Games completed: {outcomes['won']} won, {outcomes['drawn']} drawn, {len(failures)} failed")
    for n, exc in sorted(failures, key=lambda item: item[0]):
        click.echo(f'  Game {n}: {exc.code} {exc.message}')

    click.echo('')
    click.echo('Top players by wins:')
    _echo_board(lifecycle.leaderboard(ORDER_WINS), 'wins')
    click.echo('')
    click.echo('Top players by efficiency (avg moves per win):')
    _echo_board(lifecycle.leaderboard(ORDER_EFFICIENCY), 'avg moves')


def _echo_board(entries, unit):
    if not entries:
        click.echo('  No games completed yet')
    for entry in entries:
        click.echo(f"  {entry['rank']}. {entry['name']} - {entry['value']} {unit}")
