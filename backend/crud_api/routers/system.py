"""
Service endpoints: health check and the relationship table.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud_api.models import MODEL_MAP
from crud_api.services.registry import REGISTRY
from shared.config.settings import settings
from shared.infrastructure.db import get_db


router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check that also verifies database connectivity."""
    checks = {
        "status": "healthy",
        "service": "crud-api",
        "environment": settings.environment,
        "dependencies": {},
    }
    try:
        db.execute(text("SELECT 1"))
        checks["dependencies"]["database"] = {"status": "healthy"}
    except SQLAlchemyError as e:
        checks["dependencies"]["database"] = {"status": "unhealthy", "error": str(e)}
        checks["status"] = "degraded"
        return JSONResponse(content=checks, status_code=503)
    return checks


@router.get("/registry")
def list_relationships():
    """The relationship table: for every entity, who references it and through which field."""
    return {
        "entities": {
            entity: [
                {"source": group.source, "fields": list(group.fields)}
                for group in REGISTRY.dependents_of(entity)
            ]
            for entity in REGISTRY.entities()
        },
        "problems": REGISTRY.validate(MODEL_MAP),
    }
