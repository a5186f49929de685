import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Board geometry (same length unit; dimensions must be multiples of CELL_SIZE)
    BOARD_WIDTH = int(os.environ.get('BOARD_WIDTH', '600'))
    BOARD_HEIGHT = int(os.environ.get('BOARD_HEIGHT', '600'))
    CELL_SIZE = int(os.environ.get('CELL_SIZE', '20'))
    # Simulation cadence (steps per second)
    TICKS_PER_SECOND = int(os.environ.get('TICKS_PER_SECOND', '15'))
    START_TRAIL_CAPACITY = 3
    # Listen address for run.py
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma separated list, '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = '/'
    # Optional: heartbeat interval for tick worker logs (sec). 0 disables.
    TICK_HEARTBEAT_SEC = int(os.environ.get('TICK_HEARTBEAT_SEC', '0'))
    # Werkzeug dev server refuses to run outside debug unless this is set
    ALLOW_UNSAFE_WERKZEUG = os.environ.get('ALLOW_UNSAFE_WERKZEUG', '0') == '1'
