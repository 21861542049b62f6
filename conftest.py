"""Global pytest configuration."""

import os

# Point store URLs at closed ports before any imports so no test reaches a real store
os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:1/0")
os.environ.setdefault("MONGO_URL", "mongodb://127.0.0.1:1/?serverSelectionTimeoutMS=200")
