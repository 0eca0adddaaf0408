"""
Centralized test credentials and secrets.

All test-only credentials are loaded from environment variables when available,
with clearly non-production placeholders as fallbacks.
"""

from __future__ import annotations

import os

# Admin shared secret
TEST_ADMIN_PASSWORD = os.environ.get("TEST_ADMIN_PASSWORD") or "x"
TEST_ADMIN_PASSWORD_WRONG = os.environ.get("TEST_ADMIN_PASSWORD_WRONG") or "y"

# Upstream source token
TEST_SOFTR_JWT_TOKEN = os.environ.get("TEST_SOFTR_JWT_TOKEN") or "a.b.c"

# App config used by conftest and API tests
TEST_INTERNAL_JOB_TOKEN = os.environ.get("TEST_INTERNAL_JOB_TOKEN") or "test-internal-token"
