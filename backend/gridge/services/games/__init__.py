"""Game domain services: grid rules, session store, ranking.

This package contains the game engine that HTTP routes, socket handlers and
CLI commands call through ``GameLifecycle``, keeping transport concerns
separated from core game mechanics.
"""
