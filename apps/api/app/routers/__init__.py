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

__all__ = [
    "health",
    "auth",
    "members",
    "users",
    "events",
    "gallery",
    "chat",
    "notifications",
    "wishes",
    "stats",
    "admin",
]
