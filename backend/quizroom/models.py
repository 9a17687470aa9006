import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from quizroom.errors import (
    GameAlreadyEnded,
    GameNotInProgress,
    InvalidQuestionIndex,
    InvalidRoomConfig,
    PlayerAlreadyCompleted,
    PlayerNotFound,
    RoomAlreadyStarted,
)
from quizroom.services.rooms.scoring import build_leaderboard, score_answer

logger = logging.getLogger(__name__)

WAITING = 'waiting'
STARTED = 'started'
ENDED = 'ended'


@dataclass(frozen=True)
class Question:
    correct_answer: Any
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw):
        if not isinstance(raw, dict) or 'correctAnswer' not in raw:
            raise InvalidRoomConfig('Each question must be an object with a correctAnswer')
        return cls(correct_answer=raw['correctAnswer'], data=dict(raw))

    def to_dict(self):
        return dict(self.data)


@dataclass
class Player:
    name: str
    is_host: bool = False
    score: int = 0
    progress: int = 0
    completed: bool = False

    def to_dict(self):
        return {
            'name': self.name,
            'score': self.score,
            'progress': self.progress,
            'completed': self.completed,
            'isHost': self.is_host,
        }


def validate_time_limit(time_limit) -> int:
    if isinstance(time_limit, bool) or not isinstance(time_limit, int) or time_limit <= 0:
        raise InvalidRoomConfig('timeLimit must be a positive integer number of seconds')
    return time_limit


def parse_questions(questions) -> Tuple[Question, ...]:
    if not isinstance(questions, (list, tuple)) or not questions:
        raise InvalidRoomConfig('questions must be a non-empty list')
    return tuple(Question.from_dict(q) for q in questions)


class Room:
    """A quiz session: questions, players, status and final leaderboard.

    Every read-modify-write of ``status``, ``players`` and ``leaderboard``
    happens under ``self._lock``, including the event publish that follows
    it, so subscribers see events in the order state changed.

    ``gateway`` fans events out, ``scheduler`` runs the session timer and
    ``clock`` returns the current time in seconds.
    """

    def __init__(self, code: str, questions, time_limit, gateway, scheduler, clock: Callable[[], float] = time.time):
        self.code = code
        self.questions = parse_questions(questions)
        self.time_limit = validate_time_limit(time_limit)
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.status = WAITING
        self.players: Dict[str, Player] = {}
        self.leaderboard: List[Dict[str, Any]] = []
        self._gateway = gateway
        self._scheduler = scheduler
        self._clock = clock
        self._lock = threading.Lock()

    def _publish(self, event, payload):
        self._gateway.publish(self.code, event, payload)

    def join(self, player_name: str, is_host: bool = False) -> Tuple[str, bool]:
        with self._lock:
            if self.status != WAITING:
                raise RoomAlreadyStarted()
            player_id = str(uuid.uuid4())
            self.players[player_id] = Player(name=player_name, is_host=bool(is_host))
            logger.info(f"[player-joined] room={self.code} player={player_id} host={bool(is_host)}")
            self._publish('user-joined', {'playerName': player_name})
            return player_id, bool(is_host)

    def start(self) -> bool:
        """Start the session. Returns False if it was already running."""
        with self._lock:
            if self.status == STARTED:
                logger.info(f"[start-skip] room={self.code} already started")
                return False
            if self.status == ENDED:
                raise GameAlreadyEnded()
            self.status = STARTED
            self.start_time = self._clock()
            self.end_time = self.start_time + self.time_limit
            logger.info(f"[game-started] room={self.code} players={len(self.players)} time_limit={self.time_limit}s")
            self._publish('game-started', {
                'questions': [q.to_dict() for q in self.questions],
                'leaderboard': [
                    {'name': p.name, 'score': 0, 'isHost': p.is_host}
                    for p in self.players.values()
                ],
                'timeLimit': self.time_limit,
            })
            self._scheduler.schedule(self.time_limit, self.expire, label=f"room={self.code}")
            return True

    def submit_answer(self, player_id: str, question_index, answer) -> int:
        with self._lock:
            player = self.players.get(player_id)
            if player is None:
                raise PlayerNotFound(player_id)
            if (isinstance(question_index, bool) or not isinstance(question_index, int)
                    or not 0 <= question_index < len(self.questions)):
                raise InvalidQuestionIndex(question_index)
            if self.status != STARTED:
                raise GameNotInProgress()
            if player.completed:
                raise PlayerAlreadyCompleted()

            now = self._clock()
            question = self.questions[question_index]
            points = score_answer(self.start_time, self.time_limit, now, question.correct_answer, answer)
            player.score += points
            player.progress += 1
            if player.progress >= len(self.questions):
                player.completed = True
            logger.info(
                f"[answer] room={self.code} player={player_id} q={question_index} points={points} total={player.score}"
            )

            leaderboard = build_leaderboard(self.players.values())
            self._publish('leaderboard-updated', leaderboard)

            all_completed = all(p.completed for p in self.players.values())
            if all_completed or now >= self.end_time:
                self._finish(leaderboard, reason='completed' if all_completed else 'time-up')
            return player.score

    def expire(self) -> bool:
        """Session timer callback. Ends the game only if it is still running."""
        with self._lock:
            if self.status != STARTED:
                logger.info(f"[timer-abort] room={self.code} status={self.status}")
                return False
            self._finish(build_leaderboard(self.players.values()), reason='timer')
            return True

    def _finish(self, leaderboard, reason):
        # Caller holds self._lock and has checked status == STARTED
        self.status = ENDED
        self.leaderboard = leaderboard
        logger.info(f"[game-ended] room={self.code} reason={reason}")
        self._publish('game-ended', leaderboard)

    def time_remaining(self, now: Optional[float] = None) -> Optional[float]:
        if self.end_time is None:
            return None
        now = self._clock() if now is None else now
        return max(0.0, self.end_time - now)

    def to_dict(self):
        with self._lock:
            return {
                'roomCode': self.code,
                'status': self.status,
                'timeLimit': self.time_limit,
                'startTime': self.start_time,
                'endTime': self.end_time,
                'timeRemaining': self.time_remaining(),
                'questionCount': len(self.questions),
                'players': [dict(p.to_dict(), playerId=pid) for pid, p in self.players.items()],
                'leaderboard': list(self.leaderboard),
            }
