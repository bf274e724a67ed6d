"""API routes."""

from fastapi import APIRouter

from spamshield.api.routes import auth, contacts

api_router = APIRouter()

# Register/login/refresh are public; logout and /me use the access token
api_router.include_router(auth.router, tags=["auth"])

# Protected routes (auth required)
api_router.include_router(contacts.router, tags=["contacts"])
