from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.routers import (
    admin,
    auth,
    chat,
    events,
    gallery,
    health,
    members,
    notifications,
    stats,
    users,
    wishes,
)

configure_logging()

app = FastAPI(
    title="Family Hub API",
    version="1.0.0",
    description="API for the family tree, gallery, chat, calendar, wishes and notifications.",
    # We proxy the API under /api at the edge. Swagger needs a fixed openapi URL
    # that includes this prefix; we provide a custom /docs route below.
    docs_url=None,
    # Ensure the generated OpenAPI schema includes the external base path (so "Try it out" hits /api/v1/...).
    root_path=settings.root_path,
)

register_exception_handlers(app)


# Custom Swagger UI that points at the externally reachable OpenAPI URL.
@app.get("/docs", include_in_schema=False)
def swagger_ui():
    prefix = (settings.root_path or "").rstrip("/")
    openapi_url = f"{prefix}{app.openapi_url}"
    return get_swagger_ui_html(openapi_url=openapi_url, title=f"{app.title} - Docs")


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(members.router)
app.include_router(users.router)
app.include_router(events.router)
app.include_router(gallery.router)
app.include_router(chat.router)
app.include_router(notifications.router)
app.include_router(wishes.router)
app.include_router(stats.router)
app.include_router(admin.router)
