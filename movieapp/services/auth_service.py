from sqlalchemy import func
from sqlalchemy.orm import Session
from movieapp.models.user import User
from movieapp.schemas.auth import RegisterRequest, LoginRequest, AuthResult
from movieapp.utils.security import hash_password, verify_password, create_access_token, BCRYPT_MAX_BYTES
from typing import List
import logging
import re

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8
INVALID_CREDENTIALS = "Invalid email or password"


def password_policy_errors(password: str) -> List[str]:
    """Every password rule the given password breaks"""
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Passwords must be at least {PASSWORD_MIN_LENGTH} characters.")
    if len(password.encode('utf-8')) > BCRYPT_MAX_BYTES:
        errors.append(f"Passwords cannot be longer than {BCRYPT_MAX_BYTES} bytes.")
    if not re.search(r'[^a-zA-Z0-9]', password):
        errors.append("Passwords must have at least one non alphanumeric character.")
    if not re.search(r'[0-9]', password):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    if not re.search(r'[a-z]', password):
        errors.append("Passwords must have at least one lowercase ('a'-'z').")
    if not re.search(r'[A-Z]', password):
        errors.append("Passwords must have at least one uppercase ('A'-'Z').")
    return errors


def issue_token(user: User) -> str:
    return create_access_token(
        data={
            "sub": str(user.id),
            "email": user.email,
            "name": user.user_name,
        }
    )


class AuthService:
    @staticmethod
    def register_user(db: Session, request: RegisterRequest) -> AuthResult:
        errors = password_policy_errors(request.password)

        # Check existing email
        existing_user = db.query(User).filter(func.lower(User.email) == request.email.lower()).first()
        if existing_user:
            errors.append(f"Email '{request.email}' is already taken.")

        if errors:
            return AuthResult(success=False, token=None, errors=errors)

        # Create user
        new_user = User(
            email=request.email,
            user_name=request.user_name or request.email,
            password_hash=hash_password(request.password)
        )
        db.add(new_user)
        db.commit()
        db.refresh(new_user)

        return AuthResult(success=True, token=issue_token(new_user), errors=[])

    @staticmethod
    def login_user(db: Session, credentials: LoginRequest) -> AuthResult:
        user = db.query(User).filter(func.lower(User.email) == credentials.email.lower()).first()

        if not user:
            logger.warning(f"Login failed: User not found with email {credentials.email}")
            return AuthResult(success=False, token=None, errors=[INVALID_CREDENTIALS])

        if not verify_password(credentials.password, str(user.password_hash)):
            logger.warning(f"Login failed: Incorrect password for email {credentials.email}")
            return AuthResult(success=False, token=None, errors=[INVALID_CREDENTIALS])

        if not user.is_active:
            return AuthResult(success=False, token=None, errors=["Account is deactivated"])

        return AuthResult(success=True, token=issue_token(user), errors=[])
