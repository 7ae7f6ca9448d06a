import azure.functions as func

from routes.health import bp as health_bp
from routes.videos import bp as videos_bp
from services.feed import get_feed

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)
app.register_functions(health_bp)
app.register_functions(videos_bp)

# Pre-warm the snapshot when the worker loads, before the first invocation.
get_feed()
