"""
API package.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from omegaconf import DictConfig
from .routes import checkpoints, votes
from .context import init_context
from ...builder import AppContext, BorderWaitApplicationBuilder

# Initialize main app
app = FastAPI(title="borderwait API")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Public read-only data, clients are mobile/web apps
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(checkpoints.app.router, tags=["checkpoints"])
app.include_router(votes.app.router, tags=["votes"])

def configure(cfg: DictConfig) -> AppContext:
    """Builds the application context from configuration and installs it for the routes."""
    context = BorderWaitApplicationBuilder(cfg).build()
    init_context(context)
    return context
