"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter
from datetime import datetime

from app.api import shipments, parts, bom, inventory, activity, admin

api_router = APIRouter(tags=["API"])

# Include sub-routers
api_router.include_router(shipments.router)
api_router.include_router(parts.router)
api_router.include_router(bom.router)
api_router.include_router(inventory.router)
api_router.include_router(activity.router)
api_router.include_router(admin.router)

# ===================== HEALTH & STATUS =====================

@api_router.get("/status")
async def api_status():
    return {"status": "ok", "version": "1.0.0", "timestamp": datetime.now().isoformat()}
