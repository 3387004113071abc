import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Roster defaults for a freshly created timer
    DEFAULT_NAME_PREFIX = os.environ.get('DEFAULT_NAME_PREFIX', 'Player')
    INITIAL_PLAYERS = int(os.environ.get('INITIAL_PLAYERS', '2'))
    # Push intervals while a turn is running (ms)
    DISPLAY_TICK_MS = int(os.environ.get('DISPLAY_TICK_MS', '200'))
    ESCALATION_TICK_MS = int(os.environ.get('ESCALATION_TICK_MS', '1000'))
    # Length of the code clients use to join a timer
    TIMER_CODE_LENGTH = int(os.environ.get('TIMER_CODE_LENGTH', '4'))
    # Optional: heartbeat interval for ticker worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
