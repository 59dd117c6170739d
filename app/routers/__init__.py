from app.routers import dashboard, focus, gates, session

__all__ = [
    "dashboard",
    "focus",
    "gates",
    "session",
]
