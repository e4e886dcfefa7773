from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.admin import router as admin_router
from app.api.routes import router as api_router
from app.config import get_settings
from app.db import Base, engine
from app.errors import install_error_handlers
from app.utils import get_logger
import app.models  # noqa: F401 ensure models are imported so tables are known

logger = get_logger(__name__)
settings = get_settings()

# create FastAPI instance
app = FastAPI(
    title=settings.app_name,
    description="Location-based listings with distance ranking and admin management",
    version="1.0.0",
    docs_url="/api-docs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)
app.include_router(api_router)
app.include_router(admin_router)


@app.on_event("startup")
def on_startup_create_tables():
    # Ensure database tables are created on startup
    Base.metadata.create_all(bind=engine)
    logger.info("Listings API ready (database: %s)", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)
