"""ASGI entrypoint for the FoodTrack API."""

from food_track.api.app import create_app
from food_track.containers import build_container

app = create_app(build_container())
