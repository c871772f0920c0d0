from dataclasses import dataclass, asdict
from typing import List

from sqlalchemy import Float, cast, select

from gridge.models import Player

ORDER_WINS = 'wins'
ORDER_EFFICIENCY = 'efficiency'
ORDERINGS = (ORDER_WINS, ORDER_EFFICIENCY)


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    player_id: int
    name: str
    value: float

    def to_dict(self):
        return asdict(self)


def leaderboard(session, order_by: str = ORDER_WINS, limit: int = 3, decimals: int = 2) -> List[LeaderboardEntry]:
    """Top players by total wins (descending) or by average moves per win (ascending).

    Players without a win are left out. Equal scores keep registration order
    (lower player id first), so repeated queries return the same ranking.
    """
    if order_by not in ORDERINGS:
        raise ValueError(f"order_by must be one of {', '.join(ORDERINGS)}")
    if limit < 1:
        return []

    stmt = select(Player).where(Player.wins > 0)
    if order_by == ORDER_WINS:
        stmt = stmt.order_by(Player.wins.desc(), Player.id.asc())
    else:
        ratio = cast(Player.moves_in_wins, Float) / Player.wins
        stmt = stmt.order_by(ratio.asc(), Player.id.asc())
    players = session.execute(stmt.limit(limit)).scalars().all()

    entries = []
    for rank, player in enumerate(players, start=1):
        if order_by == ORDER_WINS:
            value = player.wins
        else:
            value = round(player.moves_in_wins / player.wins, decimals)
        entries.append(LeaderboardEntry(rank=rank, player_id=player.id, name=player.name, value=value))
    return entries
