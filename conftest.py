"""Global pytest configuration."""

import os

# Settings are read at first use; point them at a throwaway database first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEED_SAMPLE_DOCUMENT", "false")
