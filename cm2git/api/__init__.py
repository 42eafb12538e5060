"""API blueprints for the activity dashboard"""

from cm2git.api.activity import activity_bp
from cm2git.api.settings import settings_bp

__all__ = ['activity_bp', 'settings_bp']
