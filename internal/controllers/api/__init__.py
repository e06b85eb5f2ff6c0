from fastapi import APIRouter

from internal.controllers.api import auth

router = APIRouter(prefix="/v1")

routers = [
    auth.router,
]

for r in routers:
    router.include_router(router=r)
