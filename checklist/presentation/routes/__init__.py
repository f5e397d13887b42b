"""
Routes package for the cleaning checklist
One blueprint per page area
"""

from flask import render_template
from checklist.logger import get_logger

logger = get_logger("checklist.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from . import main, equipment, stock, users

    app.register_blueprint(main.bp)
    app.register_blueprint(equipment.bp, url_prefix='/equipment')
    app.register_blueprint(stock.bp, url_prefix='/stock')
    app.register_blueprint(users.bp, url_prefix='/users')

    @app.errorhandler(403)
    def forbidden(error):
        return render_template('errors/403.html'), 403

    @app.errorhandler(404)
    def not_found(error):
        return render_template('errors/404.html'), 404

    logger.info("All route blueprints registered successfully")
