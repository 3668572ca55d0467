"""
Authentication service: bcrypt passwords, role-carrying JWTs, registration.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import atomic
from ..exceptions import ConflictError
from ..models.user import User, UserType

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS = "access"
REFRESH = "refresh"


class AuthService:
    """Service for authentication operations."""

    def __init__(self):
        """Initialize auth service with settings."""
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.access_ttl = timedelta(minutes=settings.access_token_expire_minutes)
        self.refresh_ttl = timedelta(days=settings.refresh_token_expire_days)

    # Password operations
    def hash_password(self, password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    # Token operations
    def _encode(self, user: User, token_type: str, ttl: timedelta) -> str:
        to_encode = {
            "sub": user.id,
            "email": user.email,
            "user_type": user.user_type,
            "exp": datetime.now(timezone.utc) + ttl,
            "type": token_type,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def create_tokens(self, user: User) -> Tuple[str, str]:
        """Access and refresh token pair for a user."""
        return self._encode(user, ACCESS, self.access_ttl), self._encode(user, REFRESH, self.refresh_ttl)

    def decode_token(self, token: str, token_type: str) -> Optional[dict]:
        """
        Decode a JWT and check its type.

        Returns:
            Decoded payload, or None if the token is invalid, expired or of
            the wrong type
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Token decode error: {e}")
            return None

        if payload.get("type") != token_type:
            logger.warning(f"Expected {token_type} token, got {payload.get('type')}")
            return None
        return payload

    def verify_access_token(self, token: str) -> Optional[dict]:
        return self.decode_token(token, ACCESS)

    def verify_refresh_token(self, token: str) -> Optional[dict]:
        return self.decode_token(token, REFRESH)

    # User operations
    def authenticate_user(self, db: Session, email: str, password: str) -> Optional[User]:
        """
        Authenticate a user by email and password.

        Returns:
            User object if the credentials match an active account, None otherwise
        """
        user = self.get_user_by_email(db, email)
        if not user or not user.is_active:
            return None
        if not self.verify_password(password, user.hashed_password):
            return None
        return user

    def create_user(
        self,
        db: Session,
        email: str,
        password: str,
        name: Optional[str] = None,
        user_type: str = UserType.END_USER.value,
        phone: Optional[str] = None,
    ) -> User:
        """
        Register a new account.

        Args:
            db: Database session
            email: User's email
            password: Plain password (will be hashed)
            name: Optional display name
            user_type: "business" or "end_user"
            phone: Optional phone number (used for SMS notifications)

        Raises:
            ConflictError: email already registered
        """
        if self.get_user_by_email(db, email):
            raise ConflictError("Email already registered", {"email": ["Email already registered"]})

        user = User(
            email=email,
            hashed_password=self.hash_password(password),
            name=name,
            user_type=user_type,
            phone=phone,
        )
        with atomic(db):
            db.add(user)
        db.refresh(user)
        logger.info(f"Registered {user_type} user {user.id}")
        return user

    def get_user_by_id(self, db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()


# Singleton instance
_auth_service = None


def get_auth_service() -> AuthService:
    """Get the singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
