import math
from typing import Any, Iterable, List, Dict

BASE_POINTS = 10
MAX_TIME_BONUS = 5


def answers_match(correct_answer: Any, answer: Any) -> bool:
    """Exact equality on the answer value. Booleans never equal numbers."""
    if isinstance(correct_answer, bool) != isinstance(answer, bool):
        return False
    return correct_answer == answer


def time_bonus(start_time: float, time_limit: int, now: float) -> int:
    """Bonus in [0, MAX_TIME_BONUS] proportional to the share of time left.

    Answering instantly yields the full bonus, answering at or after the
    deadline yields nothing.
    """
    time_taken = now - start_time
    time_remaining = time_limit - time_taken
    bonus = math.floor(time_remaining / time_limit * MAX_TIME_BONUS)
    return min(MAX_TIME_BONUS, max(0, bonus))


def score_answer(start_time: float, time_limit: int, now: float, correct_answer: Any, answer: Any) -> int:
    """Points awarded for one submitted answer."""
    if not answers_match(correct_answer, answer):
        return 0
    return BASE_POINTS + time_bonus(start_time, time_limit, now)


def build_leaderboard(players: Iterable) -> List[Dict[str, Any]]:
    """Rank players by score, descending. Ties keep iteration order."""
    ranked = sorted(players, key=lambda p: p.score, reverse=True)
    return [{'name': p.name, 'score': p.score} for p in ranked]
