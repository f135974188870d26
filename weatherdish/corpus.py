"""
Recipe corpus loader.

Reads the Kaggle "Food Ingredients and Recipe Dataset with Images" CSV layout
and normalizes each row into a Recipe:

- Title, Ingredients, Instructions, Image_Name, Cleaned_Ingredients columns
- Ingredients may be a list literal ("['1 cup rice', ...]") or a plain
  comma-separated string
- Recipe ids are the 0-based data row position in the file. Rows with extra
  fields are truncated to the header width rather than dropped, so one bad
  row never shifts the ids of the rows after it
"""

import ast
import logging
import os
from typing import List, Optional

import pandas as pd

from .errors import LoadError
from .models import Recipe

logger = logging.getLogger(__name__)

DEFAULT_RECIPES_CSV = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "recipes.csv")

_QUOTE_FIXES = {"“": '"', "”": '"', "‘": "'", "’": "'"}


def _split_commas(raw: str) -> List[str]:
    return [s.strip() for s in raw.split(",") if s.strip()]


def parse_ingredients(raw) -> List[str]:
    """Best-effort parse of the Ingredients column; never raises."""
    text = str(raw or "").strip()
    if not text.startswith("["):
        return _split_commas(text)

    for bad, good in _QUOTE_FIXES.items():
        text = text.replace(bad, good)
    try:
        parsed = ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return _split_commas(text.strip("[]"))

    if not isinstance(parsed, (list, tuple)):
        return _split_commas(str(parsed))
    return [str(item).strip() for item in parsed if str(item).strip()]


def parse_instructions(raw) -> List[str]:
    return [line.strip() for line in str(raw or "").splitlines() if line.strip()]


def normalize_row(row, idx: int) -> Recipe:
    title = str(row.get("Title") or "").strip() or f"Recipe {idx + 1}"
    return Recipe(
        id=str(idx),
        title=title,
        ingredients=tuple(parse_ingredients(row.get("Ingredients"))),
        instructions=tuple(parse_instructions(row.get("Instructions"))),
        image_name=str(row.get("Image_Name") or "").strip(),
        cleaned_ingredients_text=str(row.get("Cleaned_Ingredients") or "").lower(),
    )


def load_recipes(path: Optional[str] = None) -> List[Recipe]:
    """Load the corpus from CSV. Raises LoadError if the file is unusable or empty."""
    path = path or DEFAULT_RECIPES_CSV
    try:
        width = len(pd.read_csv(path, nrows=0).columns)

        def keep_bad_line(fields):
            logger.warning(f"Recipe row with {len(fields)} fields truncated to {width}: {fields[:1]}")
            return fields[:width]

        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            engine="python",
            on_bad_lines=keep_bad_line,
        )
    except FileNotFoundError as e:
        raise LoadError(f"Recipe file not found: {path}") from e
    except pd.errors.EmptyDataError as e:
        raise LoadError(f"Recipe file is empty: {path}") from e
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise LoadError(f"Could not read recipe file {path}: {e}") from e

    if df.empty:
        raise LoadError(f"Recipe file has no rows: {path}")

    recipes = [normalize_row(row, idx) for idx, row in enumerate(df.to_dict("records"))]
    logger.info(f"Loaded {len(recipes)} recipes from {path}")
    return recipes


def find_recipe(corpus, recipe_id) -> Optional[Recipe]:
    recipe_id = str(recipe_id)
    for recipe in corpus:
        if recipe.id == recipe_id:
            return recipe
    return None
