from app.api.health import router as health_router
from app.api.views import router as views_router

ROUTERS = [health_router, views_router]
