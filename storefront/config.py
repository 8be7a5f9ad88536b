import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    
    # Database - SQLite in the instance folder for local development
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///storefront.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # Session identity travels in a header, not a cookie
    SESSION_HEADER = os.environ.get('SESSION_HEADER', 'X-Session-ID')
    
    # Cart storage: 'memory' (process lifetime) or 'database' (cart_items table)
    CART_BACKEND = os.environ.get('CART_BACKEND', 'memory')
    CART_LOCK_TIMEOUT = float(os.environ.get('CART_LOCK_TIMEOUT', 10))
    
    # Order numbers look like ORD-2026-004217
    ORDER_NUMBER_PREFIX = os.environ.get('ORDER_NUMBER_PREFIX', 'ORD')
    ORDER_NUMBER_DIGITS = int(os.environ.get('ORDER_NUMBER_DIGITS', 6))
    ORDER_NUMBER_ATTEMPTS = int(os.environ.get('ORDER_NUMBER_ATTEMPTS', 5))
    
    # Mail Configuration
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'True').lower() == 'true'
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_USERNAME')
    ORDER_NOTIFICATIONS_ENABLED = os.environ.get('ORDER_NOTIFICATIONS_ENABLED', 'False').lower() == 'true'
    ORDER_NOTIFY_BCC = os.environ.get('ORDER_NOTIFY_BCC')
    
    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.environ.get('LOG_FORMAT', 'console')
    

class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_ECHO = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    LOG_FORMAT = os.environ.get('LOG_FORMAT', 'json')
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_timeout': 10,
    }
    

class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    CART_BACKEND = 'memory'
    CART_LOCK_TIMEOUT = 2
    MAIL_DEFAULT_SENDER = 'orders@example.com'
    ORDER_NOTIFICATIONS_ENABLED = False
    LOG_LEVEL = 'WARNING'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
