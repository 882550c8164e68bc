from flask import Blueprint, jsonify, request

from champions.identity import current_identity, require_user_id
from champions.services import challenges as challenge_service
from champions.services import sessions as session_service
from champions.socketio_events import notify_challenge

challenges = Blueprint('challenges', __name__)


@challenges.route('', methods=['POST'])
def create_challenge():
    user_id = require_user_id()
    data = request.get_json(silent=True) or {}
    if data.get('opponentId') is None and not data.get('opponentUsername'):
        return jsonify({'error': 'Opponent is required', 'field': 'opponentId'}), 400
    challenge = challenge_service.create_challenge(
        user_id, data.get('opponentId'), data.get('opponentUsername'), data.get('wordListId')
    )
    notify_challenge(challenge)
    return jsonify(challenge.to_dict()), 201


@challenges.route('/<int:challenge_id>/accept', methods=['POST'])
def accept_challenge(challenge_id):
    challenge = challenge_service.accept_challenge(challenge_id, require_user_id())
    notify_challenge(challenge)
    return jsonify(challenge.to_dict())


@challenges.route('/<int:challenge_id>/decline', methods=['POST'])
def decline_challenge(challenge_id):
    challenge = challenge_service.decline_challenge(challenge_id, require_user_id())
    notify_challenge(challenge)
    return jsonify(challenge.to_dict())


@challenges.route('/<int:challenge_id>/complete', methods=['POST'])
def complete_challenge(challenge_id):
    """
    Submits the caller's challenge session. Finishing the session records the
    side's result; resubmitting an already recorded session is a no-op.
    """
    user_id = require_user_id()
    challenge = challenge_service.get_participant_challenge(challenge_id, user_id)
    data = request.get_json(silent=True) or {}
    session_id = data.get('sessionId')
    if not isinstance(session_id, int):
        return jsonify({'error': 'Session ID is required', 'field': 'sessionId'}), 400
    session = session_service.get_owned_session(session_id, current_identity())
    if session.challenge_id != challenge.id:
        return jsonify({'error': 'That session was not played for this challenge', 'field': 'sessionId'}), 400
    if not session.is_complete:
        session_service.complete_session(session, time_seconds=data.get('timeSeconds'))
    challenge = challenge_service.get_challenge(challenge_id, populate_existing=True)
    return jsonify(challenge.to_dict())


@challenges.route('/pending', methods=['GET'])
def get_pending_challenges():
    return jsonify([c.to_dict() for c in challenge_service.pending_for(require_user_id())])


@challenges.route('/active', methods=['GET'])
def get_active_challenges():
    return jsonify([c.to_dict() for c in challenge_service.active_for(require_user_id())])


@challenges.route('/completed', methods=['GET'])
def get_completed_challenges():
    return jsonify([c.to_dict() for c in challenge_service.completed_for(require_user_id())])


@challenges.route('/record', methods=['GET'])
def get_challenge_record():
    return jsonify(challenge_service.record_for(require_user_id()))


@challenges.route('/<int:challenge_id>', methods=['GET'])
def get_challenge(challenge_id):
    challenge = challenge_service.get_participant_challenge(challenge_id, require_user_id())
    return jsonify(challenge.to_dict())
