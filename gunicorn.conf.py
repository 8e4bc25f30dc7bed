import os

wsgi_app = "mams.main:app"
bind = f"0.0.0.0:{os.getenv('PORT', 8000)}"
workers = int(os.getenv('WEB_CONCURRENCY', 2))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 1000
max_requests_jitter = 100
# Each worker opens its own connection pool
preload_app = False
timeout = int(os.getenv('GUNICORN_TIMEOUT', 60))
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
