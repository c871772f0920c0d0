import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///gridge.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Leaderboard size and rounding of the efficiency score
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '3'))
    EFFICIENCY_DECIMALS = int(os.environ.get('EFFICIENCY_DECIMALS', '2'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Comma separated list of browser origins allowed to call the API
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS', 'http://localhost:4200,http://127.0.0.1:4200'
        ).split(',') if o.strip()
    ]
