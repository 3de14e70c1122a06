#!/usr/bin/env python3
"""
Main entry point for the Futsal Scoresheet web application.

This script launches the Flask-based JSON API server. Settings are read from
the environment (see scoresheet.config).
"""
from scoresheet.ui.web_app import run_web_app

if __name__ == "__main__":
    run_web_app()
