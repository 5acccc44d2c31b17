"""Serverless entrypoint exposing the LMS API to Vercel's Python runtime."""

from __future__ import annotations

import sys
from pathlib import Path

# Vercel runs this file from ``api/``; the ``app`` package lives one level up.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from app.main import app as lms_app  # noqa: E402

# The runtime picks up the module-level ASGI ``app``.
app = lms_app
