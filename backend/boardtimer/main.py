from flask import Blueprint, jsonify

from boardtimer import get_registry

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the board game turn timer!'})

@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'timers': len(get_registry().codes())})
