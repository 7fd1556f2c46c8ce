"""Tile-merge puzzle engine (grid, moves, spawning, scoring, undo, lifecycle).

Kept free of FastAPI and Redis concerns so it can be reused by API routes, scripts, and tests.
"""
