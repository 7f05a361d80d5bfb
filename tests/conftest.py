# tests/conftest.py
"""
Global test bootstrap
- Pins env before livecam modules are imported (no .env surprises, no log files)
- Pulls in shared fixtures (fake store, frozen clock, app/client)
"""

from __future__ import annotations

import os

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env (set BEFORE importing livecam so settings pick it up)
# ──────────────────────────────────────────────────────────────────────────────
os.environ.setdefault("S3_BUCKET_NAME", "unit-test-bucket")
os.environ.setdefault("S3_BUCKET_PREFIX", "cams")
os.environ.setdefault("OPERATIONAL_TIMEZONE", "Asia/Bangkok")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ["LOG_TO_FILE"] = "0"

# ──────────────────────────────────────────────────────────────────────────────
# 📦 Shared fixtures
# ──────────────────────────────────────────────────────────────────────────────
from tests.fixtures.store import *  # noqa: F401,F403,E402
from tests.fixtures.app import *    # noqa: F401,F403,E402
