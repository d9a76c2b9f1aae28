# app/utils/hash_utils.py
import bcrypt
from fastapi.concurrency import run_in_threadpool

from app.core.config import settings

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = settings.SALT_ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # not a bcrypt digest
        return False


async def hash_password_async(password: str, rounds: int = settings.SALT_ROUNDS) -> str:
    return await run_in_threadpool(hash_password, password, rounds)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)
