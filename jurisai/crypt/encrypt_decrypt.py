import bcrypt

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72
"""bcrypt only hashes the first 72 bytes and rejects longer input."""


class EncryptionDec:
    """
    Utility class for password hashing and validation.

    Methods
    -------
    hash_password(text: str) -> str
        Hashes a plaintext password using bcrypt with a generated salt.
    check_passwords(plain_text: str, passwd: str) -> bool
        Verifies a plaintext password against a hashed password.
    is_valid_password(password: str) -> bool
        Validates the length rules: `MIN_PASSWORD_LENGTH` characters, `MAX_PASSWORD_BYTES` UTF-8 bytes.
    """

    def __init__(self):
        """Initialize the EncryptionDec utility."""
        pass

    def hash_password(self, text: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Parameters
        ----------
        text : str
            The plaintext password.

        Returns
        -------
        str
            The bcrypt-hashed password (UTF-8 decoded).
        """
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(text.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def check_passwords(self, plain_text: str, passwd: str) -> bool:
        """
        Verify if a plaintext password matches a hashed password.

        Parameters
        ----------
        plain_text : str
            The plaintext password to check.
        passwd : str
            The previously hashed password to verify against.

        Returns
        -------
        bool
            True if the password matches, False otherwise (including a
            malformed stored hash).
        """
        try:
            return bcrypt.checkpw(plain_text.encode("utf-8"), passwd.encode("utf-8"))
        except ValueError:
            return False

    def is_valid_password(self, password: str) -> bool:
        """
        Validate the password length rules.

        Parameters
        ----------
        password : str
            The plaintext password to validate.

        Returns
        -------
        bool
            True if the password has at least `MIN_PASSWORD_LENGTH` characters
            and at most `MAX_PASSWORD_BYTES` bytes once UTF-8 encoded.
        """
        if password is None:
            return False
        return len(password) >= MIN_PASSWORD_LENGTH and len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES
