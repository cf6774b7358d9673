"""Gunicorn configuration for the CamRent API."""

import os

# Server socket
bind = os.environ.get('CAMRENT_BIND', '0.0.0.0:8000')

# A single worker process keeps one change feed and one notification
# buffer; threads share them. SQLite serializes the writers.
workers = 1
threads = int(os.environ.get('CAMRENT_THREADS', 4))
worker_class = 'gthread'

timeout = 30
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = os.environ.get('CAMRENT_ACCESS_LOG', 'logs/gunicorn-access.log')
errorlog = os.environ.get('CAMRENT_ERROR_LOG', 'logs/gunicorn-error.log')
loglevel = 'info'
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)s'

proc_name = 'camrent'

preload_app = True

max_requests = 1000
max_requests_jitter = 50
