from flask import Blueprint, jsonify, request

from champions.identity import current_identity
from champions.services import sessions as session_service

sessions = Blueprint('sessions', __name__)


@sessions.route('', methods=['POST'])
def create_session():
    """
    Starts a game on a word list, a difficulty tier, or an accepted challenge.
    """
    data = request.get_json(silent=True) or {}
    session = session_service.create_session(current_identity(), data)
    return jsonify(session.to_dict()), 201


@sessions.route('/<int:session_id>', methods=['GET'])
def get_session(session_id):
    session = session_service.get_owned_session(session_id, current_identity())
    payload = session.to_dict()
    payload['attempts'] = [a.to_dict() for a in session.attempts.all()]
    return jsonify(payload)


@sessions.route('/<int:session_id>/attempts', methods=['POST'])
def submit_attempt(session_id):
    """
    Records one spelling attempt; correctness is decided here, not by the client.
    """
    session = session_service.get_owned_session(session_id, current_identity())
    data = request.get_json(silent=True) or {}
    attempt = session_service.record_attempt(session, data)
    return jsonify({'attempt': attempt.to_dict(), 'session': session.to_dict()}), 201


@sessions.route('/<int:session_id>/complete', methods=['POST'])
def complete_session(session_id):
    session = session_service.get_owned_session(session_id, current_identity())
    data = request.get_json(silent=True) or {}
    session = session_service.complete_session(session, time_seconds=data.get('timeSeconds'))
    return jsonify(session.to_dict())
