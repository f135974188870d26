from flask import Flask, request, jsonify
import os
from .extensions import csrf, limiter, talisman, CSP
from .database import DATABASE, init_db
from .corpus import DEFAULT_RECIPES_CSV, load_recipes
from .errors import LoadError
from .state import DEFAULT_MAX_SESSIONS, SelectionRegistry

def create_app(test_config=None):
    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "weatherdish-dev-secret-change-me")
    app.config.update(
        DATABASE=os.environ.get("WEATHERDISH_DATABASE", DATABASE),
        RECIPES_CSV=os.environ.get("RECIPES_CSV", DEFAULT_RECIPES_CSV),
        OPENWEATHER_API_KEY=os.environ.get("OPENWEATHER_API_KEY"),
        SUPABASE_URL=os.environ.get("SUPABASE_URL"),
        SUPABASE_ANON_KEY=os.environ.get("SUPABASE_ANON_KEY"),
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
    )

    if test_config:
        app.config.update(test_config)

    # Init Extensions
    csrf.init_app(app)
    limiter.init_app(app)

    if os.environ.get("VERCEL") and not app.testing:
        talisman.init_app(app, content_security_policy=CSP)
    else:
        talisman.init_app(app, content_security_policy=CSP, force_https=False,
                          session_cookie_secure=False)

    # Initialize Database
    with app.app_context():
        try:
            init_db(app.config["DATABASE"])
        except Exception as e:
            app.logger.error(f"Database initialization failed: {e}")

    # Load the recipe corpus once; an empty corpus means "no recipes available"
    try:
        app.config["RECIPE_CORPUS"] = load_recipes(app.config["RECIPES_CSV"])
    except LoadError as e:
        app.logger.error(f"Recipe corpus load failed: {e}")
        app.config["RECIPE_CORPUS"] = []

    app.extensions["selection_registry"] = SelectionRegistry(
        app.config.get("SELECTION_MAX_SESSIONS", DEFAULT_MAX_SESSIONS))

    # Register Blueprints
    from .routes.main import main_bp
    from .routes.api import api_bp
    from .routes.auth import auth_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(auth_bp)

    # Register Error Handlers
    register_error_handlers(app)

    return app

def register_error_handlers(app):
    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({"error": "Rate limit exceeded. Please slow down."}), 429

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"error": "Internal server error occurred"}), 500

    @app.errorhandler(Exception)
    def unhandled_exception(e):
        if hasattr(e, 'code') and isinstance(e.code, int) and e.code < 500:
            return jsonify({"error": getattr(e, 'description', str(e))}), e.code
        app.logger.error(f"Unhandled Exception on {request.path}: {e}")
        return jsonify({"error": "An unexpected error occurred"}), 500
