"""JWT token creation/validation and password hashing.

Uses PyJWT for JWT operations and passlib with bcrypt for password hashing.
"""

from datetime import UTC, datetime, timedelta

import jwt
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt.

    Args:
        password: The plaintext password to hash.

    Returns:
        The bcrypt-hashed password string.
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a bcrypt hash.

    Args:
        plain_password: The plaintext password to verify.
        hashed_password: The bcrypt hash to verify against.

    Returns:
        True if the password matches, False otherwise.
    """
    return pwd_context.verify(plain_password, hashed_password)


# Compared against when the username is unknown, so both login failure paths
# pay the same bcrypt cost.
DUMMY_PASSWORD_HASH: str = hash_password("user-api-timing-equalizer")


def create_access_token(
    subject: str,
    audience: str,
    secret_key: str,
    issuer: str,
    algorithm: str = "HS256",
    expires_days: int = 30,
) -> str:
    """Create a signed login token.

    Args:
        subject: The token subject (the user id).
        audience: The token audience (the username).
        secret_key: Secret key for signing.
        issuer: Identifier of the issuing service.
        algorithm: JWT signing algorithm.
        expires_days: Token lifetime in days.

    Returns:
        The encoded JWT string.
    """
    now = datetime.now(UTC)
    payload = {
        "iss": issuer,
        "sub": subject,
        "aud": audience,
        "iat": now,
        "exp": now + timedelta(days=expires_days),
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_token(
    token: str,
    secret_key: str,
    issuer: str,
    algorithm: str = "HS256",
) -> dict:
    """Decode and validate a login token.

    The audience carries the username and is not known to the verifier, so
    it is not checked here; signature, expiry and issuer are.

    Args:
        token: The JWT string to decode.
        secret_key: Secret key used for signing.
        issuer: Expected issuer.
        algorithm: JWT signing algorithm.

    Returns:
        The decoded token payload.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired.
        jwt.InvalidTokenError: If the token is otherwise invalid.
    """
    return jwt.decode(
        token,
        secret_key,
        algorithms=[algorithm],
        issuer=issuer,
        options={"verify_aud": False, "require": ["exp", "iss", "sub"]},
    )
