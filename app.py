"""
CamRent - Camera Rental Reservation System
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import change_feed, notifier, register_snapshot_loaders

# Import database functions
from database import close_db, init_db

from utils.api_response import api_error, api_booking_error
from utils.errors import BookingError, PersistenceError
from utils.messages import get_message


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    config_class = config.get(config_name, config['default'])
    if hasattr(config_class, 'validate'):
        config_class.validate()
    app.config.from_object(config_class)
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize application extensions."""
    change_feed.init_app(app)
    register_snapshot_loaders(change_feed)
    notifier.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.api.routes import api_bp

    app.register_blueprint(api_bp, url_prefix='/api')


def register_error_handlers(app):
    """Register error handlers (JSON for every error)."""

    @app.errorhandler(BookingError)
    def booking_error(error):
        """Render booking engine errors with their context."""
        if isinstance(error, PersistenceError):
            app.logger.error(f'Persistence failure: {error}')
            notifier.notify('error', get_message('save_failed', error=error.message),
                            **error.context)
        else:
            app.logger.info(f'{type(error).__name__}: {error}')

        return api_booking_error(error)

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error('Not found', status=404)

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors."""
        return api_error('Method not allowed', status=405)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        return api_error('Internal server error', status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('reconcile')
    def reconcile_command():
        """Recompute cached availability for every camera."""
        from models.capacity import reconcile_all

        with app.app_context():
            results = reconcile_all()

        for result in results:
            marker = '*' if result['changed'] else ' '
            click.echo(f"{marker} camera {result['camera_id']}: "
                       f"{result['previous']} -> {result['cached_available']}")
        click.echo(f'Reconciled {len(results)} cameras')

    @app.cli.command('advance-booking')
    @click.argument('booking_id', type=int)
    @click.option('--actor', default='cli', help='Name recorded in the status log')
    def advance_booking_command(booking_id, actor):
        """Move a booking to its next status."""
        from models.booking_state import advance_booking

        with app.app_context():
            try:
                result = advance_booking(booking_id, actor)
            except BookingError as e:
                raise click.ClickException(str(e))

        click.echo(f"Booking {booking_id}: {result['old_status']} -> {result['new_status']}")


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/camrent.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        # Model and utility loggers share the file handler
        logging.getLogger().addHandler(file_handler)
        logging.getLogger().setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('CamRent startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', debug=True)
