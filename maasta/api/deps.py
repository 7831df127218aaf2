"""
Dependencies for the process-wide services built in main.py and kept on app.state.
"""

from fastapi import Request

from maasta.utils.background import BackgroundTaskRunner
from maasta.utils.cache import CacheVersionManager
from maasta.utils.swipe import SwipeDeckStore, SwipeService


def get_cache_manager(request: Request) -> CacheVersionManager:
    return request.app.state.cache_manager


def get_background(request: Request) -> BackgroundTaskRunner:
    return request.app.state.background


def get_swipe_service(request: Request) -> SwipeService:
    return request.app.state.swipe_service


def get_deck_store(request: Request) -> SwipeDeckStore:
    return request.app.state.deck_store
