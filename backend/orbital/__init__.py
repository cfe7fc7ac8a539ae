# backend/orbital/__init__.py
"""Orbital - meetings API with cached controlled-vocabulary metadata."""

__version__ = "0.1.0"
__title__ = "Orbital API"
__description__ = "Meetings and the event vocabularies they reference"
