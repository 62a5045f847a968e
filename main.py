# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_catalog import config
from recipe_catalog.database import close_db, get_db, init_db
from recipe_catalog.errors import register_exception_handlers
from recipe_catalog.routers import categories, ingredients, recipes, uploads

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("recipe_catalog")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Connecting to database...")
    init_db()
    yield
    close_db()


app = FastAPI(title="Recipe Catalog API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(categories.router)
app.include_router(ingredients.router)
app.include_router(recipes.router)
app.include_router(uploads.router)


@app.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {"version": app.version, "status": "ok", "db": "reachable"}
    except SQLAlchemyError as e:
        logger.warning("Health check could not reach the database: %s", e)
        return {"version": app.version, "status": "degraded", "error": str(e)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=config.PORT)
