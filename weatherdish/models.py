from dataclasses import dataclass


@dataclass(frozen=True)
class Recipe:
    id: str
    title: str
    ingredients: tuple = ()
    instructions: tuple = ()
    image_name: str = ""
    cleaned_ingredients_text: str = ""

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
            "imageName": self.image_name,
        }


@dataclass(frozen=True)
class WeatherReading:
    temperature_c: int
    condition: str
    description: str = ""
    place: str = ""
    degraded: bool = False

    def to_dict(self):
        return {
            "temperature": self.temperature_c,
            "condition": self.condition,
            "description": self.description,
            "place": self.place,
            "degraded": self.degraded,
        }


def saved_recipe_from(recipe, saved_at):
    """Persisted subset of a recipe, as stored under the saved-recipes key."""
    return {
        "id": recipe.id,
        "title": recipe.title,
        "imageName": recipe.image_name,
        "ingredients": list(recipe.ingredients),
        "instructions": list(recipe.instructions),
        "savedAt": saved_at,
    }


def user_session_from(username, logged_in_at):
    return {"username": username, "loggedInAt": logged_in_at}
