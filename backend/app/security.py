import secrets
import string
from passlib.context import CryptContext
from app.settings import get_settings

settings = get_settings()
# fixed cost factor so hashes stay comparable across deployments
pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

TOKEN_ALPHABET = string.ascii_letters + string.digits

def hash_password(p: str) -> str:
    return pwd_ctx.hash(p)

def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_ctx.verify(plain, hashed)
    except ValueError:
        # malformed stored hash
        return False

def generate_session_token(length: int | None = None) -> str:
    """Opaque alphanumeric bearer token (32 chars by default)."""
    n = length or get_settings().SESSION_TOKEN_LENGTH
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(n))
