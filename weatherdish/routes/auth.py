import sqlite3
from flask import Blueprint, request, jsonify, current_app
from ..extensions import csrf, limiter
from ..accounts import account_store_from_config, authenticate, register
from ..errors import AuthMismatch, DuplicateError, InvalidCredentials, NetworkDegraded
from ..storage import clear_current_user, get_current_user, set_current_user
from .api import get_store, json_body

auth_bp = Blueprint('auth', __name__, url_prefix='/api/user')

def _credentials():
    data = json_body() or request.form
    return data.get("username"), data.get("password")

@auth_bp.route("/register", methods=["POST"])
@csrf.exempt
@limiter.limit("10 per minute")
def api_register():
    username, password = _credentials()
    try:
        username = register(account_store_from_config(current_app.config), username, password)
    except InvalidCredentials as e:
        return jsonify({"error": str(e)}), 400
    except DuplicateError:
        return jsonify({"error": "That username already exists. Try another."}), 409
    except NetworkDegraded:
        return jsonify({"error": "Account service unavailable. Please try again."}), 503
    except sqlite3.Error as e:
        current_app.logger.error(f"Register error: {e}")
        return jsonify({"error": "Could not register."}), 500
    return jsonify({"success": True, "username": username}), 201

@auth_bp.route("/login", methods=["POST"])
@csrf.exempt
@limiter.limit("10 per minute")
def api_login():
    username, password = _credentials()
    try:
        username = authenticate(account_store_from_config(current_app.config), username, password)
        user = set_current_user(get_store(), username)
    except InvalidCredentials as e:
        return jsonify({"error": str(e)}), 400
    except AuthMismatch:
        return jsonify({
            "error": "Username/password does not exist. Please try again or register for a new account."
        }), 401
    except NetworkDegraded:
        return jsonify({"error": "Account service unavailable. Please try again."}), 503
    except sqlite3.Error as e:
        current_app.logger.error(f"Login error: {e}")
        return jsonify({"error": "Could not log in."}), 500
    return jsonify({"success": True, "user": user})

@auth_bp.route("/logout", methods=["POST"])
@csrf.exempt
def api_logout():
    clear_current_user(get_store())
    return jsonify({"success": True})

@auth_bp.route("/profile")
def api_profile():
    return jsonify({"user": get_current_user(get_store())})
