"""Production WSGI entrypoint.

  gunicorn -w 2 -b 0.0.0.0:8000 wsgi:app

Maintenance commands use the same module:

  flask --app wsgi init-db
  flask --app wsgi purge-ratelimits
"""

from studio_bingo import create_app

app = create_app()
