"""
API Routes Package

This module consolidates all API routes for the PayPal integration.
"""

from fastapi import APIRouter

from . import purchases

# Create main router
router = APIRouter()

router.include_router(purchases.router, prefix="/purchases", tags=["purchases"])

# Export for use in main application
__all__ = ["router"]
