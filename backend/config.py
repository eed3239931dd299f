import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Opponent "thinking" time before a turn resolves (seconds)
    THINKING_DELAY_SEC = float(os.environ.get('THINKING_DELAY_SEC', '1.0'))
    # Number of resolved turns kept in the match history
    HISTORY_LIMIT = int(os.environ.get('HISTORY_LIMIT', '10'))
    # Optional: fixed seed for the opponent's random source
    OPPONENT_SEED = int(os.environ['OPPONENT_SEED']) if os.environ.get('OPPONENT_SEED') else None
    # Optional: heartbeat interval for timer worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
    # Sessions untouched for this long are dropped (sec). 0 disables.
    SESSION_IDLE_TIMEOUT_SEC = float(os.environ.get('SESSION_IDLE_TIMEOUT_SEC', '1800'))
    CORS_ORIGINS = os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
    ).split(',')
