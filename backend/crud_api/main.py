"""
CRUD API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI

from crud_api.core import configure_cors, lifespan, register_middlewares
from crud_api.routers import admin_router, device_router, system_router
from shared.config.settings import settings


app = FastAPI(
    title="CRUD API",
    description="Generated CRUD backend with cascading deletes",
    version="0.1.0",
    lifespan=lifespan,
)

register_middlewares(app)
configure_cors(app)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(system_router)
app.include_router(admin_router)
app.include_router(device_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "crud_api.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=True,
    )
