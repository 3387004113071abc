from flask import Blueprint, jsonify, request, current_app, abort
from boardtimer import get_registry
from boardtimer.socketio_events import attach_ticker, broadcast_state, end_session


timers = Blueprint('timers', __name__)


def _durations():
    cfg = current_app.config
    return {
        'display_tick_ms': int(cfg.get('DISPLAY_TICK_MS', 200)),
        'escalation_tick_ms': int(cfg.get('ESCALATION_TICK_MS', 1000)),
    }


def _state_payload(session):
    payload = session.to_dict()
    # Include tick periods so clients know how often pushes arrive
    payload['durations'] = _durations()
    return payload


def _apply(timer_code: str, action: str, operation):
    """Run `operation(session)` under the session lock and reply with the new state.

    Rejected operations are not errors: the unchanged state is returned.
    """
    registry = get_registry()
    lock = registry.lock(timer_code)
    if lock is None:
        abort(404)
    with lock:
        session = registry.get(timer_code)
        if not session:
            abort(404)
        applied = operation(session)
        if not applied:
            current_app.logger.info(f"[reject] timer={session.code} action={action}")
        payload = _state_payload(session)
    broadcast_state(session)
    return jsonify(payload)


@timers.errorhandler(404)
def timer_not_found(_exc):
    return jsonify({'error': 'Timer not found'}), 404


@timers.route('/create', methods=['POST'])
def create_timer():
    session = get_registry().create()
    attach_ticker(current_app._get_current_object(), session)
    return jsonify({
        'message': 'New timer created!',
        'timer_code': session.code,
    }), 201


@timers.route('/<string:timer_code>/state', methods=['GET'])
def get_timer_state(timer_code):
    registry = get_registry()
    lock = registry.lock(timer_code)
    if lock is None:
        abort(404)
    with lock:
        session = registry.get(timer_code)
        if not session:
            abort(404)
        return jsonify(_state_payload(session))


@timers.route('/<string:timer_code>', methods=['DELETE'])
def delete_timer(timer_code):
    if not end_session(timer_code):
        abort(404)
    return jsonify({'message': 'Timer ended'})


@timers.route('/<string:timer_code>/players', methods=['POST'])
def add_player(timer_code):
    data = request.get_json(silent=True) or {}
    prefix = data.get('prefix')
    if prefix is not None and not isinstance(prefix, str):
        return jsonify({'error': 'prefix must be a string'}), 400
    return _apply(timer_code, 'add', lambda s: s.add_player(prefix))


@timers.route('/<string:timer_code>/players/<int:player_id>', methods=['DELETE'])
def remove_player(timer_code, player_id):
    return _apply(timer_code, 'remove', lambda s: s.remove_player(player_id))


@timers.route('/<string:timer_code>/players/<int:player_id>', methods=['PATCH'])
def rename_player(timer_code, player_id):
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    if not isinstance(name, str):
        return jsonify({'error': 'Player name is required'}), 400
    return _apply(timer_code, 'rename', lambda s: s.rename_player(player_id, name))


@timers.route('/<string:timer_code>/players/<int:player_id>/score', methods=['POST'])
def adjust_score(timer_code, player_id):
    data = request.get_json(silent=True) or {}
    delta = data.get('delta')
    if isinstance(delta, bool) or not isinstance(delta, int):
        return jsonify({'error': 'delta must be an integer'}), 400
    return _apply(timer_code, 'score', lambda s: s.adjust_score(player_id, delta))


@timers.route('/<string:timer_code>/players/<int:player_id>/start', methods=['POST'])
def start_player_turn(timer_code, player_id):
    return _apply(timer_code, 'start', lambda s: s.start_turn(player_id))


@timers.route('/<string:timer_code>/pause', methods=['POST'])
def pause(timer_code):
    return _apply(timer_code, 'pause', lambda s: s.pause())


@timers.route('/<string:timer_code>/resume', methods=['POST'])
def resume(timer_code):
    return _apply(timer_code, 'resume', lambda s: s.resume())


@timers.route('/<string:timer_code>/toggle', methods=['POST'])
def toggle(timer_code):
    return _apply(timer_code, 'toggle', lambda s: s.toggle())


@timers.route('/<string:timer_code>/advance', methods=['POST'])
def advance(timer_code):
    return _apply(timer_code, 'advance', lambda s: s.advance())


@timers.route('/<string:timer_code>/shuffle', methods=['POST'])
def shuffle_first(timer_code):
    return _apply(timer_code, 'shuffle', lambda s: s.shuffle_first())


@timers.route('/<string:timer_code>/reset', methods=['POST'])
def reset_all(timer_code):
    return _apply(timer_code, 'reset', lambda s: s.reset_all())
