"""Gunicorn config for serving chartprep.main:app."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Each worker loads its own copy of every dataset
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Large Excel summaries can take a while on big tables
timeout = 120
graceful_timeout = 30
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("CHARTPREP_LOG_LEVEL", "info")
