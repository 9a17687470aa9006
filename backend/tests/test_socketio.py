from conftest import QUESTIONS


def _events(sio_client, name):
    return [pkt['args'][0] for pkt in sio_client.get_received() if pkt['name'] == name]


def test_socket_connect_and_join(sio_client):
    assert sio_client.is_connected()
    sio_client.get_received()

    sio_client.emit('join-room', 'abcd1234')
    received = sio_client.get_received()
    assert [pkt['name'] for pkt in received] == ['joined']
    assert received[0]['args'][0] == {'room': 'room:ABCD1234'}


def test_join_room_requires_a_code(sio_client):
    sio_client.get_received()
    sio_client.emit('join-room', {})
    received = sio_client.get_received()
    assert received[0]['name'] == 'error'


def test_ping(sio_client):
    sio_client.get_received()
    sio_client.emit('ping', {'n': 1})
    assert _events(sio_client, 'pong') == [{'n': 1}]


def test_subscriber_receives_room_events_in_order(flask_app, sio_client, client, clock, scheduler):
    code = client.post('/create-room', json={'questions': QUESTIONS, 'timeLimit': 60}).get_json()['roomCode']

    # Subscription can precede the HTTP join
    sio_client.emit('join-room', {'roomCode': code})
    sio_client.get_received()

    a = client.post('/join-room', json={'roomCode': code, 'playerName': 'A', 'isHost': True}).get_json()
    client.post('/join-room', json={'roomCode': code, 'playerName': 'B'})
    client.post('/start-game', json={'roomCode': code})
    client.post('/submit-answer', json={
        'roomCode': code, 'playerId': a['playerId'], 'questionIndex': 0, 'answer': 'Paris',
    })
    clock.advance(60)
    scheduler.fire_all()

    received = sio_client.get_received()
    assert [pkt['name'] for pkt in received] == [
        'user-joined', 'user-joined', 'game-started', 'leaderboard-updated', 'game-ended',
    ]
    assert received[0]['args'][0] == {'playerName': 'A'}
    started = received[2]['args'][0]
    assert started['timeLimit'] == 60
    assert started['leaderboard'] == [
        {'name': 'A', 'score': 0, 'isHost': True},
        {'name': 'B', 'score': 0, 'isHost': False},
    ]
    assert received[3]['args'][0] == [{'name': 'A', 'score': 15}, {'name': 'B', 'score': 0}]
    assert received[4]['args'][0] == [{'name': 'A', 'score': 15}, {'name': 'B', 'score': 0}]


def test_other_rooms_do_not_leak(flask_app, sio_client, client):
    first = client.post('/create-room', json={'questions': QUESTIONS, 'timeLimit': 60}).get_json()['roomCode']
    second = client.post('/create-room', json={'questions': QUESTIONS, 'timeLimit': 60}).get_json()['roomCode']
    sio_client.emit('join-room', first)
    sio_client.get_received()

    client.post('/join-room', json={'roomCode': second, 'playerName': 'Elsewhere'})
    assert _events(sio_client, 'user-joined') == []


def test_leave_room_stops_delivery(flask_app, sio_client, client):
    code = client.post('/create-room', json={'questions': QUESTIONS, 'timeLimit': 60}).get_json()['roomCode']
    sio_client.emit('join-room', code)
    sio_client.emit('leave-room', code)
    received = sio_client.get_received()
    assert [pkt['name'] for pkt in received] == ['joined', 'left']

    client.post('/join-room', json={'roomCode': code, 'playerName': 'Alice'})
    assert _events(sio_client, 'user-joined') == []
