from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.auth_token import create_access_token
from app.database import get_db
from app.errors import Unauthorized, ValidationError
from app.models.user import User
from app.schemas import AuthResponse, LoginIn, SignupIn, UserPublic
from app.security import MIN_PASSWORD_LENGTH, hash_password, verify_password

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(user.id, user.email)
    return AuthResponse(token=token, user=UserPublic.model_validate(user))


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupIn, db: AsyncSession = Depends(get_db)):
    if not payload.name or not payload.email or not payload.password:
        raise ValidationError("Please provide name, email, and password")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    existing = await db.execute(select(User).where(User.email == payload.email))
    if existing.scalar_one_or_none():
        raise ValidationError("Email already exists")

    new_user = User(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)
    return _auth_response(new_user)


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginIn, db: AsyncSession = Depends(get_db)):
    if not payload.email or not payload.password:
        raise ValidationError("Please provide email and password")

    result = await db.execute(select(User).where(User.email == payload.email))
    db_user = result.scalar_one_or_none()

    if not db_user or not verify_password(payload.password, db_user.password_hash):
        raise Unauthorized("Invalid credentials")

    return _auth_response(db_user)
