"""
Test settings: in-memory SQLite so the suite runs without Docker.

Usage:
    pytest -v

pyproject.toml sets DJANGO_SETTINGS_MODULE for pytest-django already.
"""
from .development import *  # noqa: F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Disable debug toolbar in tests (avoids middleware issues)
INSTALLED_APPS = [
    app for app in INSTALLED_APPS
    if app != 'debug_toolbar'
]
MIDDLEWARE = [
    mw for mw in MIDDLEWARE
    if mw != 'debug_toolbar.middleware.DebugToolbarMiddleware'
]

PLANNER_PASSWORD = 'test-planner-password'
ANTHROPIC_API_KEY = 'test-key'
OPENAI_API_KEY = 'test-key'

AI_MODELS = {
    'assistant': 'anthropic:claude-haiku-4-5',
    'extraction': 'anthropic:claude-haiku-4-5',
    'fast': 'anthropic:claude-haiku-4-5',
}
ASSISTANT_MAX_ITERATIONS = 10
