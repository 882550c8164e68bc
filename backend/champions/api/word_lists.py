from flask import Blueprint, jsonify, request

from champions.identity import current_identity, require_user_id
from champions.services import word_lists as word_list_service

word_lists = Blueprint('word_lists', __name__)


@word_lists.route('', methods=['POST'])
def create_word_list():
    user_id = require_user_id()
    data = request.get_json(silent=True) or {}
    word_list = word_list_service.create_word_list(user_id, data)
    return jsonify(word_list.to_dict()), 201


@word_lists.route('', methods=['GET'])
def get_my_word_lists():
    return jsonify([wl.to_dict() for wl in word_list_service.lists_owned_by(require_user_id())])


@word_lists.route('/public', methods=['GET'])
def get_public_word_lists():
    return jsonify([wl.to_dict() for wl in word_list_service.public_lists()])


@word_lists.route('/shared-with-me', methods=['GET'])
def get_shared_word_lists():
    return jsonify([wl.to_dict() for wl in word_list_service.lists_shared_with(require_user_id())])


@word_lists.route('/<int:list_id>', methods=['GET'])
def get_word_list(list_id):
    word_list = word_list_service.get_readable_word_list(list_id, current_identity())
    return jsonify(word_list.to_dict())


@word_lists.route('/<int:list_id>', methods=['PUT'])
def update_word_list(list_id):
    word_list = word_list_service.get_owned_word_list(list_id, require_user_id())
    data = request.get_json(silent=True) or {}
    return jsonify(word_list_service.update_word_list(word_list, data).to_dict())


@word_lists.route('/<int:list_id>', methods=['DELETE'])
def delete_word_list(list_id):
    word_list = word_list_service.get_owned_word_list(list_id, require_user_id())
    word_list_service.delete_word_list(word_list)
    return jsonify({'message': 'Word list deleted'})


@word_lists.route('/<int:list_id>/shares', methods=['POST'])
def share_word_list(list_id):
    word_list = word_list_service.get_owned_word_list(list_id, require_user_id())
    data = request.get_json(silent=True) or {}
    if not data.get('username'):
        return jsonify({'error': 'Username is required', 'field': 'username'}), 400
    share = word_list_service.share_word_list(word_list, data['username'])
    return jsonify({'wordListId': share.word_list_id, 'userId': share.user_id}), 201


@word_lists.route('/<int:list_id>/shares', methods=['DELETE'])
def unshare_word_list(list_id):
    word_list = word_list_service.get_owned_word_list(list_id, require_user_id())
    data = request.get_json(silent=True) or {}
    if not data.get('username'):
        return jsonify({'error': 'Username is required', 'field': 'username'}), 400
    word_list_service.unshare_word_list(word_list, data['username'])
    return jsonify({'message': 'Share removed'})


@word_lists.route('/<int:list_id>/stats', methods=['GET'])
def get_word_list_stats(list_id):
    user_id = require_user_id()
    word_list = word_list_service.get_readable_word_list(list_id, current_identity())
    return jsonify(word_list_service.word_list_stats(word_list.id, user_id))


@word_lists.route('/<int:list_id>/illustrations', methods=['GET'])
def get_illustrations(list_id):
    word_list = word_list_service.get_readable_word_list(list_id, current_identity())
    return jsonify([i.to_dict() for i in word_list_service.list_illustrations(word_list)])


@word_lists.route('/<int:list_id>/illustrations', methods=['POST'])
def set_illustration(list_id):
    word_list = word_list_service.get_owned_word_list(list_id, require_user_id())
    data = request.get_json(silent=True) or {}
    illustration = word_list_service.set_illustration(
        word_list, data.get('word'), data.get('imageUrl'), source=data.get('source') or 'upload'
    )
    return jsonify(illustration.to_dict()), 201
