import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.logging import setup_logging
from app.db.base import Base, SessionLocal, engine
from app.db.sample_data import is_empty, seed_sample_data

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.project_name, openapi_url=f"{settings.api_v1_str}/openapi.json"
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_v1_str)


@app.get("/")
def read_root():
    return {"message": settings.project_name, "version": "1.0.0"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.on_event("startup")
def init_on_startup():
    """Create tables and, on an empty database, load the demo data."""
    setup_logging()
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready at {engine.url.render_as_string(hide_password=True)}")

    if not settings.seed_sample_data:
        return
    db = SessionLocal()
    try:
        if is_empty(db):
            seed_sample_data(db)
    except Exception as e:
        # Startup continues without demo data
        logger.error(f"Sample data seeding failed: {str(e)}")
    finally:
        db.close()
