"""
WSGI Entry Point for Production Deployment
VRET WASH board

Usage with Gunicorn:
    gunicorn --config gunicorn_config.py wsgi:app
"""
import os

# Set production environment if not already set
if 'FLASK_ENV' not in os.environ:
    os.environ['FLASK_ENV'] = 'production'

from vret_wash import create_app, run  # noqa: E402

# Create the application instance
app = create_app()

# This is the WSGI application object
application = app

if __name__ == "__main__":
    # In production, use a WSGI server like Gunicorn
    run()
