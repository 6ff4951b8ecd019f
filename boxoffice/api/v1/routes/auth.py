from fastapi import APIRouter, Depends, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.dependencies.auth import Actor, require_staff
from boxoffice.domain.auth.schemas import LoginResponse
from boxoffice.domain.users.schemas import MeDTO
from boxoffice.services import auth_service
from typing import Annotated


router = APIRouter(prefix='/auth', tags=['auth'])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.post("/login", response_model=LoginResponse)
async def login(form: Annotated[OAuth2PasswordRequestForm, Depends()], db: db_dependency, request: Request):
    return await auth_service.sign_in(
        db,
        form.username,
        form.password,
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent")
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(db: db_dependency, actor: Annotated[Actor, Depends(require_staff)]):
    await auth_service.sign_out(db, actor)


@router.get("/me", response_model=MeDTO)
async def me(db: db_dependency, actor: Annotated[Actor, Depends(require_staff)]):
    return await auth_service.get_user(db, actor)
