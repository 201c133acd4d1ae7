"""Test environment defaults, applied before any application module is imported."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")
os.environ.setdefault("CORS_ORIGINS", "*")
os.environ.pop("MONGO_URL", None)
