"""Serving entry point: `gunicorn run:app` or `python run.py`.

The flask CLI is pointed at the `julisha` factory by .flaskenv instead, so
`flask db upgrade` can run against an empty database.
"""

import logging

from julisha import create_app, verify_schema

app = create_app()

logging.basicConfig(
    level=app.config["LOG_LEVEL"].upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Refuse to serve until `flask db upgrade` has created the schema
with app.app_context():
    verify_schema()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["PORT"])
