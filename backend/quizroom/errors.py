"""Domain errors raised by room and scoring operations.

Each class carries the HTTP status the API layer answers with, so routes
can let them propagate to a single error handler.
"""


class QuizRoomError(Exception):
    """Base class for every quiz room error."""
    status_code = 400

    def __init__(self, message=None):
        super().__init__(message or self.__doc__)
        self.message = message or self.__doc__

    def to_dict(self):
        return {'error': self.message}


# ---- NotFound ----

class NotFound(QuizRoomError):
    """Resource not found"""
    status_code = 404


class RoomNotFound(NotFound):
    """Room not found"""

    def __init__(self, room_code):
        self.room_code = room_code
        super().__init__(f"Room {room_code} not found")


class PlayerNotFound(NotFound):
    """Player not found"""

    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__(f"Player {player_id} not found")


# ---- InvalidState ----

class InvalidState(QuizRoomError):
    """Action not allowed in the current room status"""
    status_code = 409


class RoomAlreadyStarted(InvalidState):
    """Room already started or ended"""


class GameNotInProgress(InvalidState):
    """Game is not in progress"""


class GameAlreadyEnded(InvalidState):
    """Game has already ended"""


class PlayerAlreadyCompleted(InvalidState):
    """Player has already answered every question"""


class RoomCodeSpaceExhausted(InvalidState):
    """No free room code could be generated"""


# ---- ValidationError ----

class ValidationError(QuizRoomError):
    """Invalid input"""
    status_code = 400


class InvalidQuestionIndex(ValidationError):
    """Question index out of range"""

    def __init__(self, question_index):
        self.question_index = question_index
        super().__init__(f"Invalid question index: {question_index!r}")


class InvalidRoomConfig(ValidationError):
    """Invalid room configuration"""


class MissingField(ValidationError):
    """Required field missing"""

    def __init__(self, *fields):
        self.fields = fields
        super().__init__(f"Missing required field(s): {', '.join(fields)}")
