import os

wsgi_app = "app.main:app"
preload_app = False

workers = int(os.getenv("WEB_CONCURRENCY", "4"))
worker_class = "uvicorn.workers.UvicornWorker"
