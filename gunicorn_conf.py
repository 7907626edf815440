import os

wsgi_app = "app.main:app"
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("WEB_CONCURRENCY", 2))
worker_class = "uvicorn.workers.UvicornWorker"
timeout = int(os.getenv("GUNICORN_TIMEOUT", 30))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", 30))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", 5))
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Both streams are intercepted by Loguru once the app's lifespan runs setup_logging
accesslog = "-"
errorlog = "-"
