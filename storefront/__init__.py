"""Flask application factory."""

import os
from flask import Flask, jsonify
from .config import config
from .extensions import db, migrate, mail
from .errors import StorefrontError
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(config_name=None):
    """Create and configure the Flask application."""
    if config_name is None:
        config_name = os.environ.get('FLASK_CONFIG', 'development')
    
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    
    configure_logging(app)
    
    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    
    # Import models so they are registered with SQLAlchemy
    from . import models  # noqa: F401
    
    # Cart store and checkout live for the lifetime of the app
    from .services import build_services
    app.extensions['storefront'] = build_services(app.config)
    
    # Register blueprints
    from .routes import register_blueprints
    register_blueprints(app)
    
    # Error handlers
    @app.errorhandler(StorefrontError)
    def storefront_error(error):
        return jsonify(error.to_dict()), error.status_code
    
    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'error': 'NOT_FOUND', 'message': 'Resource not found'}), 404
    
    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({'error': 'METHOD_NOT_ALLOWED', 'message': 'Method not allowed'}), 405
    
    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        logger.error('request.failed', error=str(error))
        return jsonify({'error': 'INTERNAL_ERROR', 'message': 'Internal server error'}), 500
    
    return app
