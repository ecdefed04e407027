import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'roletrando.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Rounds per game session
    TOTAL_ROUNDS = int(os.environ.get('TOTAL_ROUNDS', '4'))
    # JSON list of {"word", "tip"} objects used by `flask seed-words`
    WORDS_SEED_FILE = os.environ.get('WORDS_SEED_FILE') or os.path.join(BASE_DIR, 'roletrando', 'data', 'words.json')
    # Socket.IO listener
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '12345'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Comma separated list of front-end origins allowed by CORS and Socket.IO
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173',
    ).split(',') if o.strip()]
