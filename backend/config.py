import os

BACKEND_ROOT = os.path.dirname(os.path.abspath(__file__))


def _origins(raw):
    raw = (raw or '*').strip()
    if raw == '*':
        return '*'
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = _origins(os.environ.get('CORS_ORIGINS'))
    # Client bundle (index.html + assets/) served over HTTP
    CLIENT_DIR = os.environ.get('CLIENT_DIR') or os.path.join(BACKEND_ROOT, 'public')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8081'))
    # Spawn bounds shared by players and the collectible
    ARENA_MIN_X = int(os.environ.get('ARENA_MIN_X', '50'))
    ARENA_MAX_X = int(os.environ.get('ARENA_MAX_X', '750'))
    ARENA_MIN_Y = int(os.environ.get('ARENA_MIN_Y', '50'))
    ARENA_MAX_Y = int(os.environ.get('ARENA_MAX_Y', '550'))
    SCORE_INCREMENT = int(os.environ.get('SCORE_INCREMENT', '10'))
    # 'random' or 'alternate'
    TEAM_POLICY = os.environ.get('TEAM_POLICY', 'random')
    # Match clock (seconds). 0 disables the countdown entirely.
    MATCH_DURATION_SEC = int(os.environ.get('MATCH_DURATION_SEC', '120'))
    CLOCK_TICK_SEC = float(os.environ.get('CLOCK_TICK_SEC', '1'))
    # 'pull': clients poll match-status; 'push': clock-state broadcast on every change
    CLOCK_BROADCAST = os.environ.get('CLOCK_BROADCAST', 'pull')
    CHAT_MAX_LENGTH = int(os.environ.get('CHAT_MAX_LENGTH', '280'))
    # Optional: seed spawn positions for reproducible runs
    ARENA_SEED = int(os.environ['ARENA_SEED']) if os.environ.get('ARENA_SEED') else None
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
