# src/main.py

import logging

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.middleware import SlowAPIMiddleware
from slowapi.errors import RateLimitExceeded
from src.common.database.database import connect_to_redis, close_redis_connection
from src.common.config import settings
from src.common.rate_limit import limiter
from src.common.utils.global_messages import GlobalMessages
from src.modules.leaderboard.leaderboard_service import LeaderboardStore
from src.modules.leaderboard.ordered_set import RedisOrderedScoreSet
from src.router.routers import include_routers

# Centralized logging configuration
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Lifespan context manager for startup and shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI):
    # A backing store that does not answer PING aborts startup
    redis_client = await connect_to_redis()
    scores = RedisOrderedScoreSet(redis_client, key=settings.LEADERBOARD_KEY)
    app.state.leaderboard_store = LeaderboardStore(scores)
    yield
    app.state.leaderboard_store = None
    await close_redis_connection(redis_client)

# Initialize FastAPI app with lifespan manager
app = FastAPI(
    title="Leaderboard API",
    description="Scored leaderboard: submit points per user and query ranks.",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Middleware for CORS using allowed origins from settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers from a separate file
include_routers(app)

# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok", "message": GlobalMessages.API_RUNNING}

def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.LISTEN_HOST, port=settings.LISTEN_PORT, log_level=settings.LOG_LEVEL.lower())

if __name__ == "__main__":
    run()
