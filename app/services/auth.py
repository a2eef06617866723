import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import jwt

from app.services.storage import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
PBKDF2_ITERATIONS = 190_000
TOKEN_ALGORITHM = "HS256"


class AuthError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def hash_password(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS).hex()


class AuthService:
    """Signup/login against users.json and signed bearer tokens"""

    def __init__(self, users: UserRepository, secret: str, token_ttl_days: int = 30):
        self.users = users
        self.secret = secret
        self.token_ttl = timedelta(days=token_ttl_days)

    def signup(self, email: Optional[str], password: Optional[str], confirm_password: Optional[str]) -> Tuple[str, Dict[str, Any]]:
        if not email or not password or not confirm_password:
            raise AuthError("Email, password, and confirmation are required")
        if password != confirm_password:
            raise AuthError("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        salt = secrets.token_hex(16)
        user = self.users.add(email, hash_password(password, salt), salt)
        if user is None:
            raise AuthError("User already exists")

        logger.info("Created account %s", user["userId"])
        return self.create_token(user["userId"], email), user

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[str, Dict[str, Any]]:
        if not email or not password:
            raise AuthError("Email and password are required")

        user = self.users.get(email)
        if not user or not self._password_matches(user, password):
            raise AuthError("Invalid email or password", status_code=401)

        return self.create_token(user["userId"], email), user

    def _password_matches(self, user: Dict[str, Any], password: str) -> bool:
        expected = user.get("passwordHash", "")
        actual = hash_password(password, user.get("passwordSalt", ""))
        return hmac.compare_digest(expected, actual)

    def create_token(self, user_id: str, email: str) -> str:
        payload = {
            "userId": user_id,
            "email": email,
            "exp": datetime.now(timezone.utc) + self.token_ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=TOKEN_ALGORITHM)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Return the token payload, or raise AuthError(401) if it is forged, malformed or expired"""
        try:
            return jwt.decode(token, self.secret, algorithms=[TOKEN_ALGORITHM])
        except jwt.InvalidTokenError as e:
            raise AuthError("Invalid or expired token", status_code=401) from e
