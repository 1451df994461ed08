from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
import random
import string

from charades import db
from charades.models import User

auth = Blueprint('auth', __name__)


@auth.route('/guest', methods=['POST'])
def guest():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()[:64]
    if not username:
        username = 'Guest_' + ''.join(random.choices(string.ascii_lowercase + string.digits, k=5))
    user = User(username=username, is_guest=True)
    db.session.add(user)
    db.session.commit()
    login_user(user, remember=True)
    return jsonify(user.to_dict()), 201


@auth.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify(current_user.to_dict())


@auth.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True})
