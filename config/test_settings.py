"""
Test settings - Use SQLite for faster tests without PostgreSQL permissions.
"""

import tempfile

from config.settings import *

# Use SQLite for testing
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",  # In-memory database for speed
    }
}


# Disable migrations for faster test database creation
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

# Speed up password hashing in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable debug toolbar in tests
DEBUG = False
SECURE_HSTS_SECONDS = 0

ALLOWED_HOSTS = ["testserver", "localhost"]

# Uploaded documents go to a throwaway directory
MEDIA_ROOT = tempfile.mkdtemp(prefix="simpel-ktp-media-")

# No built assets in the test tree
VITE_MANIFEST_PATH = "/nonexistent/manifest.json"

# Use console email backend for tests
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
