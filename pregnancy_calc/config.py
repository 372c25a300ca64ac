import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration"""
    SERVICE_NAME = os.getenv('SERVICE_NAME', 'pregnancy-calculator')

    # Calculator
    DEFAULT_CALCULATION_METHOD = os.getenv('DEFAULT_CALCULATION_METHOD', 'lmp')
    # Callable returning "now"; None means the system clock
    DATING_CLOCK = None

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_FILE = os.getenv('LOG_FILE', 'app.log')
    LOG_MAX_BYTES = int(os.getenv('LOG_MAX_BYTES', '10240000'))
    LOG_BACKUP_COUNT = int(os.getenv('LOG_BACKUP_COUNT', '10'))
    LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'false').lower() == 'true'


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')
    LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'true').lower() == 'true'

    # Calculator payloads are tiny
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', '65536'))


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = False
    LOG_TO_FILE = False


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration based on FLASK_ENV"""
    env = os.getenv('FLASK_ENV', 'development')
    return config.get(env, config['default'])
