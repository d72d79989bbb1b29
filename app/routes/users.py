from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth_token import CurrentUser, get_current_user
from app.database import get_db
from app.errors import NotFound
from app.models.user import User
from app.schemas import UserPublic

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
async def read_users_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    # Token claims can outlive the account, so look the user up again.
    user = await db.get(User, current_user.id)
    if user is None:
        raise NotFound("User not found")
    return user
