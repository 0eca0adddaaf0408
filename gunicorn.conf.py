"""
Gunicorn configuration for Residency Board production deployment.

Usage:
    gunicorn residency_board.main:app -c gunicorn.conf.py
"""

import os

# Bind to all interfaces on port 8000
bind = "0.0.0.0:8000"

# Company merges are serialized by an in-process lock, so admin traffic
# must land on a single worker. Raise only behind a merge-aware proxy.
workers = int(os.getenv("WEB_CONCURRENCY", "1"))

# Use Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# Request timeout (seconds); a manual sync fetches every endpoint inline
timeout = 300

# Keep-alive connections (seconds)
keepalive = 5

# Logging
accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = "info"
