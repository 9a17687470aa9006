import logging
import threading
import time
import uuid
from typing import Any, Callable, Dict, List, Tuple

from quizroom.errors import InvalidRoomConfig, RoomCodeSpaceExhausted, RoomNotFound
from quizroom.models import Room

logger = logging.getLogger(__name__)

# 16^8 = 2^32 codes at the shortest; a uuid4 hex is 32 chars
MIN_CODE_LENGTH = 8
MAX_CODE_LENGTH = 32
MAX_CODE_ATTEMPTS = 100


def generate_room_code(length: int = 8) -> str:
    """Short upper-case room code cut from a uuid4."""
    return uuid.uuid4().hex[:length].upper()


class RoomStore:
    """Registry of live rooms keyed by code.

    The store lock only guards the mapping itself; room operations run under
    the room's own lock once the room has been looked up, so work in one room
    never blocks another.
    """

    def __init__(self, gateway, scheduler, clock: Callable[[], float] = time.time, code_length: int = 8):
        self.gateway = gateway
        self.scheduler = scheduler
        self.clock = clock
        if isinstance(code_length, bool) or not isinstance(code_length, int) \
                or not MIN_CODE_LENGTH <= code_length <= MAX_CODE_LENGTH:
            raise InvalidRoomConfig(
                f"Room code length must be between {MIN_CODE_LENGTH} and {MAX_CODE_LENGTH}, got {code_length!r}"
            )
        self.code_length = code_length
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code):
        with self._lock:
            return _normalize(code) in self._rooms

    def create_room(self, questions: List[Dict[str, Any]], time_limit: int) -> str:
        with self._lock:
            code = generate_room_code(self.code_length)
            attempts = 1
            while code in self._rooms:
                if attempts >= MAX_CODE_ATTEMPTS:
                    logger.error(f"[room-code-exhausted] attempts={attempts} rooms={len(self._rooms)}")
                    raise RoomCodeSpaceExhausted()
                logger.warning(f"Room code collision detected, regenerating: {code}")
                code = generate_room_code(self.code_length)
                attempts += 1
            # Raises on invalid input before anything is stored
            room = Room(code, questions, time_limit, self.gateway, self.scheduler, clock=self.clock)
            self._rooms[code] = room
        logger.info(f"[room-created] room={code} questions={len(room.questions)} time_limit={room.time_limit}s")
        return code

    def get_room(self, code: str) -> Room:
        with self._lock:
            room = self._rooms.get(_normalize(code))
        if room is None:
            raise RoomNotFound(code)
        return room

    def join_room(self, code: str, player_name: str, is_host: bool = False) -> Tuple[str, bool]:
        return self.get_room(code).join(player_name, is_host)

    def start_game(self, code: str) -> bool:
        return self.get_room(code).start()

    def submit_answer(self, code: str, player_id: str, question_index: int, answer: Any) -> int:
        return self.get_room(code).submit_answer(player_id, question_index, answer)


def _normalize(code) -> str:
    return str(code).strip().upper()
