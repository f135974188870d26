"""
Device-local persistence.

Each client gets its own namespace in the kv_store table. Two keys are used:
the saved-recipes list and the current session user.
"""

import json
import time
from datetime import datetime

from .database import get_db
from .models import saved_recipe_from, user_session_from

SAVED_KEY = "@saved_recipes"
USER_KEY = "@user_profile"


def now_ms():
    return int(time.time() * 1000)


class KeyValueStore:
    def __init__(self, database, namespace):
        self.database = database
        self.namespace = namespace

    def get(self, key, default=None):
        with get_db(self.database) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            ).fetchone()
        if row is None:
            return default
        return json.loads(row[0])

    def set(self, key, value):
        with get_db(self.database) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (namespace, key, value, updated_at) VALUES (?, ?, ?, ?)",
                (self.namespace, key, json.dumps(value), datetime.utcnow().isoformat()),
            )
            conn.commit()

    def remove(self, key):
        with get_db(self.database) as conn:
            conn.execute(
                "DELETE FROM kv_store WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            )
            conn.commit()


# --- Saved recipes ---

def list_saved(store):
    return store.get(SAVED_KEY, [])


def save_recipe(store, recipe, now=None):
    """Append recipe to the saved list. Returns False if it was already there."""
    saved = list_saved(store)
    if any(item.get("id") == recipe.id for item in saved):
        return False
    saved.append(saved_recipe_from(recipe, now if now is not None else now_ms()))
    store.set(SAVED_KEY, saved)
    return True


# --- Session user ---

def get_current_user(store):
    user = store.get(USER_KEY)
    if not user or not user.get("username"):
        return None
    return user


def set_current_user(store, username, now=None):
    user = user_session_from(username, now if now is not None else now_ms())
    store.set(USER_KEY, user)
    return user


def clear_current_user(store):
    store.remove(USER_KEY)
