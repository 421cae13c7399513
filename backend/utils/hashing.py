# utils/hashing.py
import bcrypt


# bcrypt only looks at the first 72 bytes of the password
def _to_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:72]


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_to_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_to_bytes(plain_password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash stored for this account
        return False
