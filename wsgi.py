import atexit

from app import create_app
from blueprints.events import EXTENSION_KEY

app = create_app()
# будим SSE-потоки при остановке процесса
atexit.register(app.extensions[EXTENSION_KEY].close)
