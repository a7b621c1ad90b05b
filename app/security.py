from passlib.context import CryptContext


pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for users created without a password as well as for a mismatch."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
