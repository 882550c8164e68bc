from flask import Blueprint, jsonify, request

from champions.identity import require_user_id
from champions.models import DIFFICULTIES, CUSTOM_DIFFICULTY, GAME_MODES
from champions.services import leaderboard as leaderboard_service

leaderboard = Blueprint('leaderboard', __name__)


@leaderboard.route('', methods=['GET'])
def get_leaderboard():
    difficulty = request.args.get('difficulty') or None
    game_mode = request.args.get('gameMode') or None
    if difficulty and difficulty not in DIFFICULTIES + (CUSTOM_DIFFICULTY,):
        return jsonify({'error': 'Unknown difficulty', 'field': 'difficulty'}), 400
    if game_mode and game_mode not in GAME_MODES:
        return jsonify({'error': 'Unknown game mode', 'field': 'gameMode'}), 400
    scores = leaderboard_service.top_scores(difficulty=difficulty, game_mode=game_mode)
    return jsonify([s.to_dict() for s in scores])


@leaderboard.route('/me', methods=['GET'])
def get_my_best_scores():
    scores = leaderboard_service.best_scores_for(require_user_id())
    return jsonify([s.to_dict() for s in scores])
