# Gunicorn configuration file
import os

# Server socket
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Sessions and boards live in process memory, so a single worker keeps every
# request of a browser session on the same board
workers = 1
worker_class = "sync"
max_requests = 0
preload_app = True

# Loading a board makes one provider call per category
timeout = 120
keepalive = 2
graceful_timeout = 30
worker_tmp_dir = "/dev/shm"

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("GUNICORN_LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Process naming
proc_name = "jeopardy_api"

# Server mechanics
daemon = False
pidfile = None
