from flask import Blueprint, jsonify, request

from champions import db
from champions.identity import require_user_id
from champions.models import User
from champions.services import shop as shop_service

shop = Blueprint('shop', __name__)


@shop.route('', methods=['GET'])
def get_user_items():
    user_id = require_user_id()
    user = db.session.get(User, user_id)
    return jsonify({
        'stars': user.stars,
        'items': [i.to_dict() for i in shop_service.inventory_for(user_id)],
        'unlockedThemes': shop_service.unlocked_themes(user_id),
    })


@shop.route('/list', methods=['GET'])
def get_shop_items():
    return jsonify(shop_service.catalog())


@shop.route('/purchase', methods=['POST'])
def purchase_item():
    user_id = require_user_id()
    data = request.get_json(silent=True) or {}
    if not data.get('itemId'):
        return jsonify({'error': 'Item ID is required', 'field': 'itemId'}), 400
    return jsonify(shop_service.purchase(user_id, data['itemId'], data.get('quantity')))


@shop.route('/use', methods=['POST'])
def use_item():
    user_id = require_user_id()
    data = request.get_json(silent=True) or {}
    if not data.get('itemId'):
        return jsonify({'error': 'Item ID is required', 'field': 'itemId'}), 400
    return jsonify(shop_service.use_item(user_id, data['itemId'], data.get('quantity')))
