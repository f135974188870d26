import sqlite3
from flask import Blueprint, request, jsonify, current_app
from ..extensions import limiter, csrf
from ..corpus import find_recipe
from ..recommender import SelectionSession, start_session, pick_initial, pick_next
from ..storage import KeyValueStore, get_current_user, list_saved, save_recipe
from ..utils import get_client_id
from ..utils.weather import fetch_weather_reading

api_bp = Blueprint('api', __name__, url_prefix='/api')

NO_RECIPES = "No recipes available"

# --- Helpers ---

def get_corpus():
    return current_app.config.get("RECIPE_CORPUS", [])

def get_registry():
    return current_app.extensions["selection_registry"]

def get_store():
    """Key-value store scoped to the calling client."""
    return KeyValueStore(current_app.config["DATABASE"], get_client_id())

def json_body():
    """Parsed JSON object from the request, or {} for anything else."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def get_rng():
    # Tests inject a seeded random.Random through the app config
    return current_app.config.get("SELECTION_RNG")

# --- Routes ---

@api_bp.route("/recommendation")
@limiter.limit("30 per minute")
def api_recommendation():
    corpus = get_corpus()
    if not corpus:
        return jsonify({"error": NO_RECIPES}), 503

    lat = request.args.get('lat')
    lon = request.args.get('lon')
    reading = fetch_weather_reading(lat, lon, current_app.config.get("OPENWEATHER_API_KEY"))

    # Only replace the client's session once the weather call has finished
    selection = start_session(corpus, reading.temperature_c, reading.condition)
    recipe = pick_initial(selection, corpus, get_rng())

    client_id = get_client_id()
    registry = get_registry()
    with registry.lock:
        registry.put(client_id, selection)

    current_app.logger.info(
        f"Recommendation for {reading.place} ({reading.temperature_c}°C, {reading.condition}): "
        f"pool of {len(selection.pool)}"
    )
    return jsonify({
        "place": reading.place,
        "weather": reading.description,
        "reading": reading.to_dict(),
        "poolSize": len(selection.pool),
        "recipe": recipe.to_dict() if recipe else None,
    })

@api_bp.route("/recommendation/more", methods=["POST"])
@csrf.exempt
def api_recommendation_more():
    corpus = get_corpus()
    if not corpus:
        return jsonify({"error": NO_RECIPES}), 503

    data = json_body()
    current_id = data.get("currentId")
    if current_id is not None:
        current_id = str(current_id)

    client_id = get_client_id()
    registry = get_registry()
    with registry.lock:
        # Without a weather pool every pick falls back to the whole corpus
        selection = registry.get(client_id) or SelectionSession()
        recipe = pick_next(selection, corpus, current_id, get_rng())
        registry.put(client_id, selection)

    if recipe is None:
        return jsonify({"error": "No recipes found"}), 404
    return jsonify({"recipe": recipe.to_dict()})

@api_bp.route("/recipes/<recipe_id>")
def api_recipe_detail(recipe_id):
    recipe = find_recipe(get_corpus(), recipe_id)
    if recipe is None:
        return jsonify({"error": "Recipe not found"}), 404
    return jsonify(recipe.to_dict())

@api_bp.route("/saved", methods=["GET", "POST"])
@csrf.exempt
def api_saved():
    store = get_store()

    if request.method == "GET":
        try:
            if not get_current_user(store):
                return jsonify({"error": "Login required", "redirectTo": "saved"}), 401
            return jsonify(list_saved(store))
        except sqlite3.Error as e:
            current_app.logger.error(f"Saved recipes load error: {e}")
            return jsonify({"error": "Could not load saved recipes."}), 500

    data = json_body()
    recipe_id = data.get("id")
    if recipe_id is None:
        return jsonify({"error": "Missing recipe id"}), 400

    recipe = find_recipe(get_corpus(), recipe_id)
    if recipe is None:
        return jsonify({"error": "Recipe not found"}), 404

    try:
        added = save_recipe(store, recipe)
    except sqlite3.Error as e:
        current_app.logger.error(f"Save recipe error: {e}")
        return jsonify({"error": "Could not save recipe."}), 500

    return jsonify({"success": True, "alreadySaved": not added})
