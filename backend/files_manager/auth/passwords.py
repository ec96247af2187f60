"""Password hashes for user records. Login verifies the Basic-auth password here."""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt only looks at the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


def _bcrypt_input(password: str) -> str:
    raw = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return raw.decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    """Hash stored in User.password_hash (bootstrap user and create_user)."""
    return pwd_context.hash(_bcrypt_input(password))


def verify_password(password: str, password_hash: str) -> bool:
    """True if password matches a stored User.password_hash."""
    return pwd_context.verify(_bcrypt_input(password), password_hash)
