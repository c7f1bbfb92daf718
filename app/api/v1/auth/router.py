from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser, LoginData, LoginRequest, TokenData, UserInfo
from app.auth.services import get_me, login_user, refresh_token
from app.core.exceptions import ServiceError
from app.core.schemas import ApiResponse
from app.db.session import get_db

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=ApiResponse[LoginData],
    status_code=http_status.HTTP_200_OK,
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[LoginData]:
    try:
        return ApiResponse(data=await login_user(db, payload))
    except ServiceError as e:
        if e.status_code == http_status.HTTP_500_INTERNAL_SERVER_ERROR:
            raise HTTPException(status_code=e.status_code, detail="Internal server error")
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/login-oauth")
async def login_oauth(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    try:
        payload = LoginRequest(
            email=form_data.username.strip(),
            password=form_data.password,
        )
    except ValueError:
        raise HTTPException(status_code=http_status.HTTP_400_BAD_REQUEST, detail="Invalid email")
    try:
        result = await login_user(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {
        "access_token": result.token,
        "token_type": "bearer",
    }


@router.post("/logout", response_model=ApiResponse[None])
async def logout(current_user: CurrentUser = Depends(get_current_user)) -> ApiResponse[None]:
    # Stateless JWT: the client drops the token
    return ApiResponse(message="Logged out successfully")


@router.post("/refresh", response_model=ApiResponse[TokenData])
async def refresh(current_user: CurrentUser = Depends(get_current_user)) -> ApiResponse[TokenData]:
    return ApiResponse(data=refresh_token(current_user))


@router.get("/me", response_model=ApiResponse[UserInfo])
async def me(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse[UserInfo]:
    try:
        return ApiResponse(data=await get_me(db, current_user))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
