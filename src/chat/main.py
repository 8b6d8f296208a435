"""ASGI entry point for the chat app (Socket.IO mounted over FastAPI)."""

import socketio
from fastapi import FastAPI

from src.chat.server import sio
from src.config import get_settings

settings = get_settings()

fastapi_app = FastAPI(
    title="Chat",
    description="Realtime chat and location sharing",
    version="0.1.0",
)


@fastapi_app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}


app = socketio.ASGIApp(sio, other_asgi_app=fastapi_app)
