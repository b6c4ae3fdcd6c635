"""API routes."""

from fastapi import APIRouter

from sakuraboard.api.v1 import admin, auth, board, health, tuner_exam, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(tuner_exam.admin_router, prefix="/admin/tuner-exams", tags=["admin"])
router.include_router(board.router, prefix="/board", tags=["board"])
router.include_router(tuner_exam.router, prefix="/tuner-exam", tags=["tuner-exam"])
