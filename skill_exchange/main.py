# skill_exchange/main.py
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from skill_exchange import __version__
from skill_exchange.api import auth, credits, messages, profiles, requests, reviews, sessions, skills, tutors
from skill_exchange.config import settings
from skill_exchange.database import Base, engine

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="Skill Exchange API", version=__version__, debug=settings.DEBUG)

# Public avatar bucket
AVATAR_DIR = Path(settings.AVATAR_DIR)
AVATAR_DIR.mkdir(parents=True, exist_ok=True)
app.mount(settings.AVATAR_PUBLIC_PREFIX, StaticFiles(directory=str(AVATAR_DIR)), name="avatars")

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(auth.router)       # /auth/*
app.include_router(profiles.router)   # /profiles/*
app.include_router(skills.router)     # /skills/*
app.include_router(tutors.router)     # /tutors/*
app.include_router(requests.router)   # /requests/*
app.include_router(sessions.router)   # /sessions/*
app.include_router(credits.router)    # /credits/*
app.include_router(messages.router)   # /conversations/*
app.include_router(reviews.router)    # /reviews/*

logger.info("Skill Exchange API started (env=%s)", settings.APP_ENV)


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "Skill Exchange API is running",
        "version": __version__,
    }
