from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from movieapp.database import get_db
from movieapp.schemas.auth import RegisterRequest, LoginRequest, AuthResult, UserResponse
from movieapp.services.auth_service import AuthService
from movieapp.utils.dependencies import get_current_user
from movieapp.models.user import User

logger = logging.getLogger(__name__)

# Define router
router = APIRouter(prefix="/api/auth", tags=["Authentication"])


# Register a new user
@router.post("/register", response_model=AuthResult)
def register(request: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    """
    Register a new user and return a bearer token

    Password rules and duplicate emails are reported in `errors` with 400.
    """
    try:
        result = AuthService.register_user(db, request)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Error during registration for email {request.email}", exc_info=True)
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return AuthResult(success=False, token=None, errors=["An error occurred during registration"])

    if not result.success:
        logger.warning(f"Registration failed for email {request.email}: {', '.join(result.errors)}")
        response.status_code = status.HTTP_400_BAD_REQUEST
        return result

    logger.info(f"User registered successfully: {request.email}")
    return result


# Login endpoint
@router.post("/login", response_model=AuthResult)
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Login with email and password"""
    try:
        result = AuthService.login_user(db, credentials)
    except SQLAlchemyError:
        logger.error(f"Error during login for email {credentials.email}", exc_info=True)
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return AuthResult(success=False, token=None, errors=["An error occurred during login"])

    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return result

    logger.info(f"User logged in successfully: {credentials.email}")
    return result


# Get current authenticated user
@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return current_user
