from flask import current_app
from flask_login import current_user
from flask_socketio import emit, join_room
from champions import socketio
from champions.models import Challenge

NAMESPACE = '/ws'
LEADERBOARD_ROOM = 'leaderboard'


def _user_room(user_id: int) -> str:
    return f"user:{user_id}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_user(data=None):
    """Join the caller's private room for challenge updates."""
    if not current_user.is_authenticated:
        emit('error', {'message': 'Authentication required'})
        return
    room = _user_room(current_user.id)
    join_room(room)
    emit('joined', {'room': room})


def handle_join_leaderboard(data=None):
    join_room(LEADERBOARD_ROOM)
    emit('joined', {'room': LEADERBOARD_ROOM})


def handle_ping(data):
    emit('pong', data or {})


def notify_challenge(challenge: Challenge) -> None:
    payload = {'challengeId': challenge.id, 'status': challenge.status, 'challenge': challenge.to_dict()}
    for user_id in {challenge.initiator_id, challenge.opponent_id}:
        socketio.emit('challenge_update', payload, to=_user_room(user_id), namespace=NAMESPACE)
    current_app.logger.info(f"[challenge_update] challenge={challenge.id} status={challenge.status}")


def notify_leaderboard(difficulty) -> None:
    socketio.emit('leaderboard_update', {'difficulty': difficulty}, to=LEADERBOARD_ROOM, namespace=NAMESPACE)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('join_user', handle_join_user, namespace=NAMESPACE)
    socketio.on_event('join_leaderboard', handle_join_leaderboard, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
