"""Global pytest configuration."""

import os

# The module-level app must come up on the in-memory store during tests
os.environ.pop("ASSISTANT_DATABASE_URL", None)
os.environ.setdefault("ASSISTANT_LOG_LEVEL", "DEBUG")
