"""
Top-level package for the Progress Tracker API.

All functionality lives in submodules under ``app``; build the ASGI
application with ``progress_tracker_api.app.main.create_app``.
"""

__all__ = []
