from flask_socketio import join_room, leave_room, emit
from boardtimer import socketio, get_registry
from boardtimer.services.session import TimerSession
from boardtimer.services.ticker import TurnTicker


def _room(timer_code: str) -> str:
    return f"timer:{timer_code.upper()}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_timer(data):
    timer_code = (data or {}).get('timer_code')
    if not timer_code:
        emit('error', {'message': 'timer_code is required'})
        return
    room = _room(timer_code)
    join_room(room)
    emit('joined', {'room': room})
    # Late joiners get the current state right away
    registry = get_registry()
    lock = registry.lock(timer_code)
    if lock is None:
        return
    with lock:
        session = registry.get(timer_code)
        if session:
            emit('state_update', session.to_dict())


def handle_leave_timer(data):
    timer_code = (data or {}).get('timer_code')
    if not timer_code:
        emit('error', {'message': 'timer_code is required'})
        return
    room = _room(timer_code)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})

# ---- Server push helpers ----

def broadcast_state(session: TimerSession) -> None:
    """Push the full state of a timer to everyone watching it."""
    socketio.emit('state_update', session.to_dict(), to=_room(session.code), namespace='/ws')


def attach_ticker(app, session: TimerSession) -> TurnTicker:
    """Wire a TurnTicker for the session to Socket.IO.

    - Spawns no background loops in TESTING mode unless ENABLE_TICKER_IN_TESTS
    - Emits to the session's room on the /ws namespace
    """
    code = session.code
    registry = app.extensions['timer_registry']

    def _emit(event, payload):
        with app.app_context():
            socketio.emit(event, payload, to=_room(code), namespace='/ws')

    start_task = socketio.start_background_task
    if app.config.get('TESTING') and not app.config.get('ENABLE_TICKER_IN_TESTS'):
        start_task = None

    ticker = TurnTicker(
        session,
        registry.lock(code),
        _emit,
        start_task=start_task,
        sleep=socketio.sleep,
        display_period_ms=int(app.config.get('DISPLAY_TICK_MS', 200)),
        escalation_period_ms=int(app.config.get('ESCALATION_TICK_MS', 1000)),
        heartbeat_sec=int(app.config.get('TIMER_HEARTBEAT_SEC', 0)),
    )
    app.logger.info(f"[ticker-attach] timer={code} spawn={start_task is not None}")
    return ticker


def end_session(timer_code: str) -> bool:
    """Drop a timer and tell its viewers it is gone."""
    registry = get_registry()
    lock = registry.lock(timer_code)
    if lock is None:
        return False
    with lock:
        session = registry.get(timer_code)
        if not session:
            return False
        # stop the ticker loops before the session disappears
        session.pause()
        registry.drop(timer_code)
    socketio.emit('session_ended', {'timer_code': session.code}, to=_room(session.code), namespace='/ws')
    return True


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    # Primary namespace
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_timer', handle_join_timer, namespace='/ws')
    socketio.on_event('leave_timer', handle_leave_timer, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        # Test-only mirror on default namespace
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_timer', handle_join_timer, namespace='/')
        socketio.on_event('leave_timer', handle_leave_timer, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
