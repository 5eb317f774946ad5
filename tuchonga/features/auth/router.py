from fastapi import APIRouter, Depends, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security import jwt
from tuchonga.core.security.deps import get_current_user, oauth2_scheme
from tuchonga.common.schemas.responses import ApiResponse
from tuchonga.features.auth import service, schemas

router = APIRouter(prefix="/auth", tags=["auth"])

COOKIE_NAME = "refresh_token"


# LOGIN
@router.post("/login", response_model=schemas.LoginResponse)
def login(response: Response, form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user, access, refresh = service.login_issue_tokens(db, email=form.username, password=form.password)

    ttl = jwt.exp_seconds_left(jwt.decode_token(refresh, jwt.REFRESH))
    response.set_cookie(
        key=COOKIE_NAME,
        value=refresh,
        httponly=True,
        secure=False,
        samesite="lax",
        path="/api/auth",
        max_age=ttl,
    )
    return {"access_token": access, "refresh_token": refresh, "token_type": "bearer", "user": user}


# mobile sign-up with email + password
@router.post("/register", response_model=schemas.CurrentUser, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.RegisterRequest, db: Session = Depends(get_db)):
    return service.register_user(db, payload)


@router.post("/refresh", response_model=schemas.TokenPairResponse)
def refresh(payload: schemas.RefreshRequest, db: Session = Depends(get_db)):
    access, new_refresh = service.refresh_rotate_tokens(db, payload.refresh_token)
    return schemas.TokenPairResponse(access_token=access, refresh_token=new_refresh)


# LOGOUT
@router.post("/logout", response_model=ApiResponse)
def logout(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    service.logout(db, token)
    return {"message": "Logged out"}


# token check for the admin SPA
@router.get("/me", response_model=schemas.CurrentUser)
def me(current=Depends(get_current_user)):
    return current
