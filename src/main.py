import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import CREATE_TABLES, LOG_LEVEL
from database import create_tables
from share.router import router as share_router
from tournament.errors import TournamentError
from tournament.router import router as tournament_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if CREATE_TABLES:
        await create_tables()
        logger.info("Database tables ready")
    yield


app = FastAPI(title="Padel Americano", lifespan=lifespan)


@app.exception_handler(TournamentError)
async def tournament_error_handler(request: Request, exc: TournamentError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.reason}")
    content = {"success": False, "error": exc.reason}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


app.include_router(tournament_router)
app.include_router(share_router)
