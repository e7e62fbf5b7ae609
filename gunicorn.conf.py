# gunicorn.conf.py
# gunicorn -c gunicorn.conf.py   (serves wsgi:application)
import os


def env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return int(default)


def env_flag(name, default=False):
    v = os.environ.get(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


wsgi_app = "wsgi:application"
bind = f"0.0.0.0:{os.environ.get('PORT', '8080')}"
workers = env_int("WEB_CONCURRENCY", 2)
timeout = env_int("GUNICORN_TIMEOUT", 120)

# create_app() runs db.create_all(); load it once in the master
preload_app = env_flag("GUNICORN_PRELOAD", True)

# proxies allowed to set X-Forwarded-*
forwarded_allow_ips = os.environ.get("FORWARDED_ALLOW_IPS", "127.0.0.1")

loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")
