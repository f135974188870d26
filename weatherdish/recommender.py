"""
Weather-Based Recipe Selection
Maps a weather reading to keyword buckets, narrows the corpus to a candidate
pool and picks recipes from it without repeating within a cycle.
"""

import random
from dataclasses import dataclass, field
from typing import List, Optional, Set


# Keyword buckets searched in priority order
COLD_KEYWORDS = ["soup", "stew", "haleem", "baked", "roast"]
MILD_RAIN_KEYWORDS = ["curry", "noodle", "ramen", "stir fry"]
MILD_KEYWORDS = ["pasta", "mac and cheese", "risotto"]
WARM_RAIN_KEYWORDS = ["noodle", "pho", "soup"]
WARM_CLEAR_KEYWORDS = ["salad", "ceviche", "cold", "dip"]
WARM_KEYWORDS = ["stir fry", "grill", "roast"]


@dataclass
class SelectionSession:
    """Candidate pool and exclusion set owned by one client."""
    pool: list = field(default_factory=list)
    excluded: Set[str] = field(default_factory=set)
    current_id: Optional[str] = None


def keywords_from_weather(temp_c, condition) -> List[str]:
    if temp_c <= 10:
        return list(COLD_KEYWORDS)
    if temp_c <= 20:
        return list(MILD_RAIN_KEYWORDS) if condition == "Rain" else list(MILD_KEYWORDS)
    if condition == "Rain":
        return list(WARM_RAIN_KEYWORDS)
    if condition == "Clear":
        return list(WARM_CLEAR_KEYWORDS)
    return list(WARM_KEYWORDS)


def filter_by_keyword(recipes, keyword):
    kw = keyword.lower()
    return [
        r for r in recipes
        if kw in r.title.lower() or kw in (r.cleaned_ingredients_text or "").lower()
    ]


def build_pool(corpus, temp_c, condition):
    """First keyword bucket with any match wins; otherwise the whole corpus."""
    for kw in keywords_from_weather(temp_c, condition):
        matches = filter_by_keyword(corpus, kw)
        if matches:
            return matches
    return list(corpus)


def start_session(corpus, temp_c, condition) -> SelectionSession:
    return SelectionSession(pool=build_pool(corpus, temp_c, condition))


def pick_random_different(recipes, current_id, rng=None):
    """Uniform pick from recipes other than current_id, or None when there is none."""
    rng = rng or random
    choices = [r for r in recipes if r.id != current_id]
    if not choices:
        return None
    return rng.choice(choices)


def pick_initial(session, corpus, rng=None):
    rng = rng or random
    if session.pool:
        picked = rng.choice(session.pool)
        session.excluded.add(picked.id)
    else:
        # No weather matches: any recipe, untracked
        picked = pick_random_different(corpus, None, rng)
    session.current_id = picked.id if picked else None
    return picked


def pick_next(session, corpus, current_id=None, rng=None):
    """
    Picks the recipe shown after current_id.

    Walks the unused part of the pool, restarts the cycle once it is
    exhausted and never returns current_id while an alternative exists.
    Picks drawn from the full corpus are not recorded in the exclusion set.
    """
    rng = rng or random
    if current_id is None:
        current_id = session.current_id

    others = [r for r in session.pool if r.id != current_id]
    if not others:
        picked = pick_random_different(corpus, current_id, rng)
        session.current_id = picked.id if picked else current_id
        return picked

    unused = [r for r in session.pool if r.id not in session.excluded]
    if not unused:
        session.excluded.clear()
        unused = others
    unused = [r for r in unused if r.id != current_id]

    if not unused:
        picked = pick_random_different(corpus, current_id, rng)
        session.current_id = picked.id if picked else current_id
        return picked

    picked = rng.choice(unused)
    session.excluded.add(picked.id)
    session.current_id = picked.id
    return picked
