"""bcrypt password hasher used by every transition that assigns a password."""

import bcrypt

from warden_identity.exceptions import WeakPasswordError


class PasswordHashingService:
    """Hash and check user passwords.

    There is no implicit hashing anywhere else: registration, password
    reset and profile updates all call ``hash`` themselves and hand the
    result to the ``User`` aggregate. bcrypt embeds the salt and the work
    factor in its output, so ``verify`` needs nothing besides the stored
    string.

    Examples
    --------
    >>> hasher = PasswordHashingService(rounds=4)
    >>> stored = hasher.hash("correct horse battery")
    >>> hasher.verify("correct horse battery", stored)
    True
    """

    MIN_LENGTH = 8
    MAX_LENGTH = 128

    def __init__(self, rounds: int = 12):
        """
        Parameters
        ----------
        rounds
            bcrypt cost (log2 of the key expansion rounds). Tests use 4.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Return a salted bcrypt hash of an acceptable password.

        Raises
        ------
        WeakPasswordError
            If the password is empty, too short or too long
        """
        self.validate_strength(password)
        digest = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds))
        return digest.decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Check a candidate password.

        OAuth-only accounts carry no hash and never match. A malformed
        stored hash is treated as a mismatch.
        """
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def validate_strength(self, password: str) -> None:
        if not password:
            raise WeakPasswordError("Password cannot be empty")
        if len(password) < self.MIN_LENGTH:
            raise WeakPasswordError(f"Password must be at least {self.MIN_LENGTH} characters")
        if len(password) > self.MAX_LENGTH:
            raise WeakPasswordError(f"Password cannot exceed {self.MAX_LENGTH} characters")
