"""API v1 router aggregator."""

from fastapi import APIRouter

from notifier.api.v1 import email

api_router = APIRouter(tags=["API v1"])

api_router.include_router(email.router, prefix="/email", tags=["Email"])
