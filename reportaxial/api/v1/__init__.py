from fastapi import APIRouter

from .problems import router as problems_router

api_router = APIRouter()

# ========== Problemas / conversa ================
api_router.include_router(problems_router, prefix="/problems", tags=["problems"])
