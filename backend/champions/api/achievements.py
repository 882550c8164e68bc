from flask import Blueprint, jsonify, request

from champions.identity import require_user_id
from champions.services import achievements as achievement_service
from champions.services.word_lists import get_word_list
from champions import db

achievements = Blueprint('achievements', __name__)


@achievements.route('/user/<int:user_id>', methods=['GET'])
def get_user_achievements(user_id):
    if user_id != require_user_id():
        return jsonify({'error': 'You can only view your own achievements'}), 403
    return jsonify([a.to_dict() for a in achievement_service.achievements_for_user(user_id)])


@achievements.route('/recompute', methods=['POST'])
def recompute_achievement():
    """
    Rebuilds the caller's mastery record for one list from their session history.
    """
    user_id = require_user_id()
    data = request.get_json(silent=True) or {}
    word_list_id = data.get('wordListId')
    if not isinstance(word_list_id, int):
        return jsonify({'error': 'Word list ID is required', 'field': 'wordListId'}), 400
    word_list = get_word_list(word_list_id)
    achievement = achievement_service.recompute_achievement(user_id, word_list)
    db.session.commit()
    return jsonify({'achievement': achievement.to_dict() if achievement else None})
