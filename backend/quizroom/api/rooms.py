from flask import Blueprint, jsonify, request, current_app
from quizroom import get_room_store
from quizroom.errors import MissingField, QuizRoomError, ValidationError


rooms = Blueprint('rooms', __name__)


@rooms.errorhandler(QuizRoomError)
def handle_room_error(exc):
    current_app.logger.info(f"[rejected] {request.path} {type(exc).__name__}: {exc.message}")
    return jsonify(exc.to_dict()), exc.status_code


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _require(data, *fields):
    missing = [f for f in fields if data.get(f) in (None, '')]
    if missing:
        raise MissingField(*missing)
    return [data[f] for f in fields]


@rooms.route('/create-room', methods=['POST'])
def create_room():
    data = _json_body()
    questions, time_limit = _require(data, 'questions', 'timeLimit')
    room_code = get_room_store().create_room(questions, time_limit)
    return jsonify({'roomCode': room_code}), 201


@rooms.route('/join-room', methods=['POST'])
def join_room():
    data = _json_body()
    room_code, player_name = _require(data, 'roomCode', 'playerName')
    if not isinstance(player_name, str):
        raise ValidationError('playerName must be a string')
    player_id, is_host = get_room_store().join_room(room_code, player_name, bool(data.get('isHost', False)))
    return jsonify({'playerId': player_id, 'isHost': is_host})


@rooms.route('/start-game', methods=['POST'])
def start_game():
    data = _json_body()
    room_code, = _require(data, 'roomCode')
    if not get_room_store().start_game(room_code):
        # Idempotent start: already started
        return jsonify({'message': 'Game already started'})
    return jsonify({'message': 'Game started'})


@rooms.route('/submit-answer', methods=['POST'])
def submit_answer():
    data = _json_body()
    room_code, player_id = _require(data, 'roomCode', 'playerId')
    if 'questionIndex' not in data:
        raise MissingField('questionIndex')
    if 'answer' not in data:
        raise MissingField('answer')
    score = get_room_store().submit_answer(room_code, player_id, data['questionIndex'], data['answer'])
    return jsonify({'score': score})


@rooms.route('/rooms/<string:room_code>', methods=['GET'])
def get_room_state(room_code):
    return jsonify(get_room_store().get_room(room_code).to_dict())
