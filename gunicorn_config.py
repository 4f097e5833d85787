"""Gunicorn configuration for production.

Run with: gunicorn -c gunicorn_config.py
"""
import multiprocessing
import os

# Application
wsgi_app = "payment_optimizer:create_app()"

# Server socket
port = os.getenv("PORT", "8000")
bind = f"0.0.0.0:{port}"
backlog = 2048

# Worker processes
# Orders and the id sequence live in process memory, so the in-memory store
# needs a single worker; scale with threads instead.
workers_env = os.getenv("GUNICORN_WORKERS")
if workers_env:
    workers = int(workers_env)
elif os.getenv("ORDER_STORAGE_TYPE", "memory").lower() == "memory":
    workers = 1
else:
    workers = min(multiprocessing.cpu_count(), 8)

worker_class = "gthread"
threads = int(os.getenv("GUNICORN_THREADS", "8"))
timeout = 120  # provider calls may take up to their configured timeout
keepalive = 5
graceful_timeout = 30

# Logging
accesslog = "-"  # stdout
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

capture_output = True

# Process naming
proc_name = "payment-optimizer"

# Server mechanics
daemon = False
pidfile = None
umask = 0
user = None
group = None
tmp_upload_dir = None
