import bcrypt

MIN_PASSWORD_LENGTH = 8


def password_problems(plain_password) -> list:
    """Return a list of reasons the password is rejected (empty when fine)."""
    if not isinstance(plain_password, str) or not plain_password:
        return ["Password is required"]
    problems = []
    if len(plain_password) < MIN_PASSWORD_LENGTH:
        problems.append(f"At least {MIN_PASSWORD_LENGTH} characters")
    if not any(c.isdigit() for c in plain_password):
        problems.append("At least one digit")
    if not any(c.isalpha() for c in plain_password):
        problems.append("At least one letter")
    # bcrypt only looks at the first 72 bytes
    if len(plain_password.encode("utf-8")) > 72:
        problems.append("At most 72 bytes")
    return problems


def hash_password(plain_password: str, rounds: int = 12) -> str:
    if not isinstance(plain_password, str) or len(plain_password) == 0:
        raise ValueError("Password must be a non-empty string")

    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            password_hash.encode("utf-8")
        )
    except ValueError:
        # malformed stored hash
        return False
