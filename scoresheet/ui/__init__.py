"""
UI package for the Futsal Scoresheet.

This package contains the Flask JSON API used by the mobile front end.
"""
from .web_app import create_app, run_web_app, WebAppState

__all__ = ["create_app", "run_web_app", "WebAppState"]
