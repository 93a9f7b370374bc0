from fastapi import APIRouter, Depends

from app_context import AppContext
from deps import get_ctx
from schemas import LoginRequest, LoginOut

router = APIRouter()

@router.post("/login", response_model=LoginOut)
def login(payload: LoginRequest, ctx: AppContext = Depends(get_ctx)):
    # AuthenticationError propagates to the 401 handler in main
    user = ctx.auth.authenticate(payload.username, payload.password, ctx.users)
    return LoginOut(username=user.username, role=user.role)
