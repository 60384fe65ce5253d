"""
Flask extensions initialization.

Extensions are created here without binding to the app, then bound in the
application factory using the init_app() pattern.
"""
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_socketio import SocketIO

# These will be bound to the app in create_app() using init_app()
socketio = SocketIO()
cors = CORS()
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",  # single process; the store is in-process too
    strategy="fixed-window"
)
