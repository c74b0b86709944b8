import logging

from fastapi import APIRouter, HTTPException, status, Depends

from driftai.models.user import AuthResponse, UserCreate, UserLogin, UserInDB, UserPublic
from driftai.core.security import get_password_hash, verify_password, create_access_token, get_current_user_id
from driftai.db import dynamo
from driftai.db.dynamo import EmailTakenError

router = APIRouter()
logger = logging.getLogger(__name__)


def _public(user: dict) -> UserPublic:
    return UserPublic(
        user_id=user["user_id"],
        email=user["email"],
        company_name=user.get("company_name"),
        created_at=user.get("created_at", ""),
    )


@router.post("/register", response_model=AuthResponse)
def register(user: UserCreate):
    # Check if user already exists
    existing = dynamo.get_user_by_email(user.email)
    if existing:
        raise HTTPException(status_code=400, detail="Email already exists")

    user_db = UserInDB(
        email=user.email,
        password_hash=get_password_hash(user.password),
        company_name=user.company_name,
    )

    try:
        success = dynamo.put_user(user_db.model_dump(exclude_none=True))
    except EmailTakenError:
        raise HTTPException(status_code=400, detail="Email already exists")
    if not success:
        raise HTTPException(status_code=500, detail="Registration failed")

    logger.info(f"Registered user {user_db.user_id}")
    token = create_access_token(data={"sub": user_db.user_id})
    return AuthResponse(token=token, user=_public(user_db.model_dump()))


@router.post("/login", response_model=AuthResponse)
def login(login_data: UserLogin):
    user = dynamo.get_user_by_email(login_data.email)

    if not user or not verify_password(login_data.password, user["password_hash"]):
        logger.warning(f"Failed login for email: {login_data.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = create_access_token(data={"sub": user["user_id"]})
    logger.info(f"Login successful for user: {user['user_id']}")
    return AuthResponse(token=token, user=_public(user))


@router.get("/me", response_model=UserPublic)
def get_current_user(user_id: str = Depends(get_current_user_id)):
    """Get current user profile"""
    user = dynamo.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _public(user)
