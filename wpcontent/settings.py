"""Runtime settings for wpcontent.

Each value can be overridden through the environment variable named in the
comment above it.
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# WordPress REST endpoints
# ---------------------------------------------------------------------------
# WPCONTENT_API_URL
WORDPRESS_API_URL = os.getenv(
    "WPCONTENT_API_URL", "https://michigandaily.com/wp-json/wp/v2",
).rstrip("/")

# WPCONTENT_TEST_API_URL
TEST_SITE_API_URL = os.getenv(
    "WPCONTENT_TEST_API_URL", "https://md-clone.newspackstaging.com/wp-json/wp/v2",
).rstrip("/")

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
# WPCONTENT_TIMEOUT (seconds)
DOWNLOAD_TIMEOUT = int(os.getenv("WPCONTENT_TIMEOUT", "30"))

# WPCONTENT_USER_AGENT
USER_AGENT = os.getenv("WPCONTENT_USER_AGENT", "wpcontent/0.1 (+https://michigandaily.com)")

# WPCONTENT_MAX_RETRIES (extra attempts on 429/5xx and network errors)
MAX_RETRIES = int(os.getenv("WPCONTENT_MAX_RETRIES", "0"))

# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------
# Used for core/video blocks whose <video> element has no usable dimensions.
DEFAULT_VIDEO_ASPECT_RATIO = 16 / 9

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
# WPCONTENT_LOG_LEVEL
LOG_LEVEL = os.getenv("WPCONTENT_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
