import os
import sys
from flask import Blueprint, jsonify, current_app

main_bp = Blueprint('main', __name__)

@main_bp.route('/health')
def health_check():
    """Health check endpoint for debugging deployment issues."""
    return jsonify({
        "status": "ok",
        "python_version": sys.version,
        "environment": "vercel" if os.environ.get("VERCEL") else "local",
        "recipes_loaded": len(current_app.config.get("RECIPE_CORPUS", [])),
        "active_sessions": len(current_app.extensions["selection_registry"]),
        "env_vars_set": {
            "FLASK_SECRET_KEY": bool(os.environ.get("FLASK_SECRET_KEY")),
            "OPENWEATHER_API_KEY": bool(current_app.config.get("OPENWEATHER_API_KEY")),
            "SUPABASE_URL": bool(current_app.config.get("SUPABASE_URL")),
            "SUPABASE_ANON_KEY": bool(current_app.config.get("SUPABASE_ANON_KEY")),
        }
    })

@main_bp.route("/")
def home():
    return jsonify({
        "name": "WeatherDish",
        "endpoints": {
            "recommendation": "/api/recommendation?lat=<lat>&lon=<lon>",
            "more": "/api/recommendation/more",
            "recipe": "/api/recipes/<id>",
            "saved": "/api/saved",
            "register": "/api/user/register",
            "login": "/api/user/login",
            "logout": "/api/user/logout",
            "profile": "/api/user/profile",
        }
    })
