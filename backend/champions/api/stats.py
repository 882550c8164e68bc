from flask import Blueprint, jsonify, request

from champions.identity import require_user_id
from champions.services import stats as stats_service

stats = Blueprint('stats', __name__)


@stats.route('/stats/user/<int:user_id>', methods=['GET'])
def get_user_stats(user_id):
    if user_id != require_user_id():
        return jsonify({'error': 'You can only view your own stats'}), 403
    date_filter = request.args.get('dateFilter', 'all')
    return jsonify(stats_service.user_stats(user_id, date_filter, request.args.get('timezone')))


@stats.route('/streaks', methods=['GET'])
def get_streaks():
    return jsonify(stats_service.streak_for(require_user_id()))
