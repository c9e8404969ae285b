from fastapi import APIRouter

from mamacare.api.routes.admin import reminders as reminders_admin

api_router = APIRouter()

api_router.include_router(reminders_admin.router, prefix="/admin/reminders")
