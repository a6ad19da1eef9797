from healthdesk.errors import ValidationError

MAX_USERNAME_LENGTH = 64
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def validate_username(username: str) -> None:
    """Validate username meets requirements.

    Requirements:
    - Not empty
    - At most 64 characters
    - No leading or trailing whitespace

    Raises:
        ValidationError: If username doesn't meet requirements
    """
    if not username:
        raise ValidationError("Username is required")

    if len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at most {MAX_USERNAME_LENGTH} characters long")

    if username != username.strip():
        raise ValidationError("Username cannot start or end with whitespace")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Raises:
        ValidationError: If password is empty or longer than bcrypt can hash
    """
    if not password:
        raise ValidationError("Password is required")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
