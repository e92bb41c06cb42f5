"""
Routes Package - Blueprint Registration

This package organizes Flask routes into modular blueprints for better
code organization and maintainability.
"""

from .main import main_bp
from .taxonomy import taxonomy_bp
from .feeds import feeds_bp
from .popups import popups_bp

__all__ = ['main_bp', 'taxonomy_bp', 'feeds_bp', 'popups_bp']
