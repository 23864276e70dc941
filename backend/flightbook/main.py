from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from flightbook.config import settings
from flightbook.database import init_db
from flightbook.errors import register_exception_handlers
import logging

# Configure basic logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Flight booking backend: accounts, flights, airports and flight search",
    version="1.0.0"
)

origins = ["*"]

if settings.is_production:
    origins = settings.cors_origin_list()

logger.info(f"CORS origins: {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

from flightbook.routers import airports, flights, system, users
app.include_router(users.router)
app.include_router(flights.router)
app.include_router(airports.router)
app.include_router(system.router)

@app.on_event("startup")
def create_tables():
    init_db()
    logger.info("Database tables ready.")

@app.get("/health")
def health_check():
    """
    Basic health check endpoint to verify service is running.
    """
    return {"status": "ok", "environment": settings.env}
