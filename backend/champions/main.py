import uuid

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from champions import db
from champions.models import User
from champions.services.moderation import contains_inappropriate_content
from champions.services.shop import THEMES, DEFAULT_THEME, unlocked_themes

main = Blueprint('main', __name__)

USER_SEARCH_LIMIT = 10


@main.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    if not username or not password:
        return jsonify({'error': 'Missing username or password'}), 400
    if len(username) > 64:
        return jsonify({'error': 'Username must be at most 64 characters', 'field': 'username'}), 400
    if len(password) < 6:
        return jsonify({'error': 'Password must be at least 6 characters', 'field': 'password'}), 400
    if contains_inappropriate_content(username):
        return jsonify({'error': 'Please choose a different username', 'field': 'username'}), 400

    if User.query.filter_by(username=username).first():
        return jsonify({'error': 'Username already exists', 'field': 'username'}), 400

    user = User(username=username)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    login_user(user, remember=True)
    current_app.logger.info(f"[register] user={user.id}")
    return jsonify(user.to_dict()), 201


@main.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(username=(data.get('username') or '').strip()).first()
    if user and user.check_password(data.get('password') or ''):
        login_user(user, remember=True)
        return jsonify(user.to_dict())
    return jsonify({'error': 'Invalid username or password'}), 401


@main.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})


@main.route('/guest-session', methods=['POST'])
def start_guest_session():
    """Issue a device id for playing without an account."""
    return jsonify({'guestId': uuid.uuid4().hex, 'header': current_app.config.get('GUEST_ID_HEADER', 'X-Guest-Id')}), 201


@main.route('/user', methods=['GET'])
@login_required
def get_user():
    payload = current_user.to_dict()
    payload['unlockedThemes'] = unlocked_themes(current_user.id)
    return jsonify(payload)


@main.route('/users/search', methods=['GET'])
@login_required
def search_users():
    """Username prefix search for picking a challenge opponent."""
    query = (request.args.get('q') or '').strip()
    if not query:
        return jsonify({'error': 'Search text is required', 'field': 'q'}), 400
    pattern = query.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_') + '%'
    users = (
        User.query.filter(User.username.ilike(pattern, escape='\\'), User.id != current_user.id)
        .order_by(User.username)
        .limit(USER_SEARCH_LIMIT)
        .all()
    )
    return jsonify([{'id': u.id, 'username': u.username, 'selectedAvatar': u.selected_avatar} for u in users])


@main.route('/user', methods=['PATCH'])
@login_required
def update_user():
    data = request.get_json(silent=True) or {}
    if 'selectedTheme' in data:
        theme = data.get('selectedTheme')
        if theme != DEFAULT_THEME and theme not in THEMES:
            return jsonify({'error': 'Unknown theme', 'field': 'selectedTheme'}), 400
        if theme not in unlocked_themes(current_user.id):
            return jsonify({'error': 'Buy this theme in the shop first', 'field': 'selectedTheme'}), 403
        current_user.selected_theme = theme
    if 'selectedAvatar' in data:
        avatar = data.get('selectedAvatar')
        if avatar is not None and (not isinstance(avatar, str) or len(avatar) > 256):
            return jsonify({'error': 'Invalid avatar', 'field': 'selectedAvatar'}), 400
        current_user.selected_avatar = avatar
    db.session.add(current_user)
    db.session.commit()
    return jsonify(current_user.to_dict())
