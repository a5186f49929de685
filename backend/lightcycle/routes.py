from flask import Blueprint, jsonify

from lightcycle import get_controller

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the lightcycle game server!'})

@main.route('/api/state')
def state():
    """Read-only view of the current match for monitoring."""
    return jsonify(get_controller().view())
