# flowershop/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from flowershop.api import include_routers
from flowershop.data.database import Base, engine
from flowershop.utils.logging import get_logger

# import wszystkich modeli zanim zrobimy create_all
import flowershop.data.models  # noqa: F401

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Flower Shop",
        version="1.0.0",
        lifespan=lifespan,
    )
    return include_routers(app)


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
