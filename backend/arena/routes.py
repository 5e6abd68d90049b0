import os

from flask import Blueprint, abort, current_app, jsonify, send_from_directory

main = Blueprint('main', __name__)


def _client_dir():
    return os.path.abspath(current_app.config['CLIENT_DIR'])


@main.route('/')
def index():
    client_dir = _client_dir()
    if not os.path.isfile(os.path.join(client_dir, 'index.html')):
        abort(404)
    return send_from_directory(client_dir, 'index.html')


@main.route('/assets/<path:filename>')
def assets(filename):
    return send_from_directory(os.path.join(_client_dir(), 'assets'), filename)


@main.route('/api/state')
def match_state():
    """Read-only snapshot of the live match."""
    return jsonify(current_app.extensions['arena_router'].state())
