"""
Gunicorn configuration for production deployment.

Usage:
    gunicorn -c gunicorn.conf.py wsgi:app
"""

import multiprocessing
import os

# --- Bind ---
bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:8000')

# --- Workers ---
# Each request runs its own event loop for validation and the outbound
# POST, so plain sync workers are enough.
workers = min(multiprocessing.cpu_count() * 2 + 1, 4)
worker_class = 'sync'

# --- Timeouts ---
# The outbound POST has no timeout of its own unless SUBMIT_TIMEOUT is
# set; this is the upper bound on a stuck submission.
timeout = 30
graceful_timeout = 10
keepalive = 2

# --- Worker Recycling ---
max_requests = 1000
max_requests_jitter = 50

# --- Request Limits ---
limit_request_line = 8190
limit_request_fields = 50
limit_request_field_size = 8190

# --- Logging ---
# Access log never includes request bodies (the form carries a password).
accesslog = '-'
errorlog = '-'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" %(L)s'
loglevel = os.environ.get('LOG_LEVEL', 'info')

proc_name = 'user-onboarding'

forwarded_allow_ips = os.environ.get('FORWARDED_ALLOW_IPS', '127.0.0.1')
