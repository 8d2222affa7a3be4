"""
User Service - registration, login and user lookup behind bearer tokens
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from .config import settings
from .db import init_db
from .errors import register_error_handlers
from .routes import auth, health, users

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Initialize database on startup"""
    init_db()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="User registration, login and lookup API",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(health.router)
