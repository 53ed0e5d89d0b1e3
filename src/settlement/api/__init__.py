"""
API package exposing the engines over HTTP with FastAPI.

The API is stateless: each request carries the moves and case context it
needs. See ``main.py`` for application creation and ``routers`` for the
endpoint definitions.
"""
