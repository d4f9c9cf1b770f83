from passlib.context import CryptContext

# bcrypt ignores everything past this many bytes
MAX_PASSWORD_BYTES = 72


def make_password_context(rounds: int = 10) -> CryptContext:
    """
    Builds the bcrypt context used for user passwords.
    Each hash carries its own random salt and the cost factor it was made with,
    so changing the rounds later only affects new hashes.
    """
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


class PasswordHasher:
    def __init__(self, rounds: int = 10):
        self.context = make_password_context(rounds)

    def hash(self, password: str) -> str:
        if password_too_long(password):
            raise ValueError(f"Password is longer than {MAX_PASSWORD_BYTES} bytes")
        return self.context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        # A longer password would be truncated by bcrypt and match its own prefix
        if password_too_long(plain_password):
            self.context.dummy_verify()
            return False
        # passlib compares digests in constant time
        return self.context.verify(plain_password, hashed_password)

    def dummy_verify(self) -> None:
        """
        Spends the same time as a real verification.
        Used when the username is unknown so login timing does not reveal it.
        """
        self.context.dummy_verify()
