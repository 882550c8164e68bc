from flask import Blueprint, jsonify

from champions.models import Word

words = Blueprint('words', __name__)


@words.route('/by-text/<string:text>', methods=['GET'])
def get_word_by_text(text):
    word = Word.query.filter_by(word=text.strip().lower()).first()
    if not word:
        return jsonify({'error': 'Word not found'}), 404
    return jsonify(word.to_dict())
