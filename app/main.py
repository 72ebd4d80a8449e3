import logging

from app import config

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

from fastapi import FastAPI  # noqa: E402
from fastapi.responses import RedirectResponse  # noqa: E402
from app.api.base import api_router  # noqa: E402
from app.middleware.route_gate import RouteGateMiddleware  # noqa: E402

app = FastAPI(
    title="Task Tracker API",
    description="Personal task tracking backed by Supabase auth and storage",
    version="1.0.0"
)

# Session refresh and auth/dashboard redirects
app.add_middleware(RouteGateMiddleware)

# Include all API routes
app.include_router(api_router)


@app.get("/")
def read_root():
    return RedirectResponse(config.DASHBOARD_PATH)
