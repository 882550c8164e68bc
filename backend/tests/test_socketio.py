from conftest import LIST_WORDS, perfect, play

from champions import socketio


def _names(client):
    return [pkt['name'] for pkt in client.get_received('/ws')]


def test_socket_connect_and_ping(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    assert 'connected' in _names(sio_client)

    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_join_user_requires_login(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_user', {}, namespace='/ws')
    assert 'error' in _names(sio_client)


def test_leaderboard_updates_are_pushed(flask_app, sio_client, alice, word_list):
    sio_client.emit('join_leaderboard', {}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    play(alice, word_list['id'], perfect(LIST_WORDS[:2]))
    received = sio_client.get_received('/ws')
    updates = [pkt for pkt in received if pkt['name'] == 'leaderboard_update']
    assert updates and updates[0]['args'][0] == {'difficulty': 'custom'}


def test_challenge_updates_reach_both_players(flask_app, alice, bob, word_list):
    bob_socket = socketio.test_client(flask_app, flask_test_client=bob, namespace='/ws')
    bob_socket.emit('join_user', {}, namespace='/ws')
    assert 'joined' in _names(bob_socket)

    challenge = alice.post('/api/challenges', json={'opponentUsername': 'bob', 'wordListId': word_list['id']}).get_json()
    received = bob_socket.get_received('/ws')
    updates = [pkt['args'][0] for pkt in received if pkt['name'] == 'challenge_update']
    assert updates[0]['challengeId'] == challenge['id']
    assert updates[0]['status'] == 'pending'

    bob.post(f"/api/challenges/{challenge['id']}/accept")
    statuses = [pkt['args'][0]['status'] for pkt in bob_socket.get_received('/ws') if pkt['name'] == 'challenge_update']
    assert statuses == ['active']
    bob_socket.disconnect(namespace='/ws')
