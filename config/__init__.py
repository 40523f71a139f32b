"""
Configuration module for TrueFrame
Loads environment variables and provides configuration settings
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Application configuration"""

    # Flask settings
    ENV = os.getenv('FLASK_ENV', 'development')
    DEBUG = os.getenv('FLASK_ENV', 'development') == 'development'

    # Server settings
    HOST = os.getenv('SERVER_HOST', '127.0.0.1')
    PORT = int(os.getenv('SERVER_PORT', '5000'))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Size ceilings (bytes)
    MAX_UPLOAD_BYTES = int(os.getenv('MAX_UPLOAD_BYTES', str(10 * 1024 * 1024)))
    BODY_SIZE_LIMIT = int(os.getenv('BODY_SIZE_LIMIT', str(10 * 1024 * 1024)))

    # Rate limiting (fixed window, per client identifier)
    RATE_LIMIT_MAX = int(os.getenv('RATE_LIMIT_MAX', '20'))
    RATE_LIMIT_WINDOW_SECONDS = float(os.getenv('RATE_LIMIT_WINDOW_SECONDS', '60'))
    RATE_LIMIT_MAX_BUCKETS = int(os.getenv('RATE_LIMIT_MAX_BUCKETS', '10000'))

    # Remote image fetch
    FETCH_TIMEOUT_SECONDS = float(os.getenv('FETCH_TIMEOUT_SECONDS', '10'))

    # Google Custom Search (sample images)
    GOOGLE_CSE_API_KEY = os.getenv('GOOGLE_CSE_API_KEY')
    GOOGLE_CSE_CX = os.getenv('GOOGLE_CSE_CX')
