import string
import secrets

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

# Codes that would shadow a fixed route
RESERVED_CODES = {"health", "list", "stats", "shorten", "docs", "redoc"}


def generate_random_code(length: int = 6) -> str:
    if length < 1:
        raise ValueError(f"Code length must be positive, got {length}")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))
