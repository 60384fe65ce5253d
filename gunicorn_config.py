"""
Gunicorn Configuration for Production Deployment
VRET WASH board

The record store lives in process memory, so exactly one worker process
serves every client; concurrency comes from threads.

Usage:
    gunicorn --config gunicorn_config.py wsgi:app
"""
import os

# Server Socket
bind = os.getenv('GUNICORN_BIND', f"0.0.0.0:{os.getenv('PORT', '3002')}")
backlog = int(os.getenv('GUNICORN_BACKLOG', '2048'))

# Worker Processes
workers = 1
worker_class = 'gthread'
threads = int(os.getenv('GUNICORN_THREADS', '100'))
timeout = int(os.getenv('GUNICORN_TIMEOUT', '120'))
keepalive = int(os.getenv('GUNICORN_KEEPALIVE', '5'))

# Server Mechanics
daemon = False
pidfile = os.getenv('GUNICORN_PIDFILE', None)

# Logging
accesslog = os.getenv('GUNICORN_ACCESS_LOG', '-')  # '-' for stdout
errorlog = os.getenv('GUNICORN_ERROR_LOG', '-')    # '-' for stderr
loglevel = os.getenv('GUNICORN_LOG_LEVEL', 'info')
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process Naming
proc_name = 'vret_wash_board'


# Server Hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting VRET WASH board")


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("VRET WASH board is ready. Listening on: %s", bind)


def worker_int(worker):
    """Called when a worker receives the SIGINT or SIGQUIT signal."""
    worker.log.info("Worker received SIGINT or SIGQUIT")


# Security
limit_request_line = int(os.getenv('GUNICORN_LIMIT_REQUEST_LINE', '4096'))
limit_request_fields = int(os.getenv('GUNICORN_LIMIT_REQUEST_FIELDS', '100'))
limit_request_field_size = int(os.getenv('GUNICORN_LIMIT_REQUEST_FIELD_SIZE', '8190'))

# Graceful Timeout
graceful_timeout = int(os.getenv('GUNICORN_GRACEFUL_TIMEOUT', '30'))

# Environment Variables
raw_env = [
    f"FLASK_ENV={os.getenv('FLASK_ENV', 'production')}",
]
