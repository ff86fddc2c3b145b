"""Credential hashing for comment deletion passwords.

Clients hash the password in the browser (SHA-256, hex) before sending it.
The server salts and stretches that digest with PBKDF2-HMAC-SHA256 and stores
``base64(salt):base64(key)``. The parameters are part of the stored format and
must not change without a migration.
"""

import base64
import binascii
import hashlib
import hmac
import secrets


# Client secrets are hex digests; only this many characters are hashed
PASSWORD_INPUT_LENGTH = 32

SALT_BYTES = 9
KEY_BYTES = 36
ITERATIONS = 10_000
DIGEST = "sha256"


def hash_password(password: str, salt: bytes | None = None) -> str:
    """Hash a client secret into a salted credential.

    Args:
        password: Client-side hashed secret (hex digest).
        salt: Salt to reuse. A fresh random salt is drawn when omitted.

    Returns:
        Credential string ``base64(salt):base64(derived_key)``

    Example:
        >>> credential = hash_password("5e884898da28047151d0e56f8dc62927")
        >>> len(credential.split(":"))
        2
    """
    if salt is None:
        salt = secrets.token_bytes(SALT_BYTES)

    derived_key = hashlib.pbkdf2_hmac(
        DIGEST,
        password[:PASSWORD_INPUT_LENGTH].encode("utf-8"),
        salt,
        ITERATIONS,
        dklen=KEY_BYTES,
    )

    return (
        f"{base64.b64encode(salt).decode('ascii')}:"
        f"{base64.b64encode(derived_key).decode('ascii')}"
    )


def verify_password(credential: str, password: str) -> bool:
    """Verify a client secret against a stored credential.

    Args:
        credential: Stored credential. Empty for tombstoned comments.
        password: Candidate client secret.

    Returns:
        True if the candidate re-derives to exactly the stored credential.
    """
    if not credential:
        return False

    encoded_salt, _, _ = credential.partition(":")
    try:
        salt = base64.b64decode(encoded_salt, validate=True)
    except (binascii.Error, ValueError):
        return False

    candidate = hash_password(password, salt)
    return hmac.compare_digest(candidate.encode("utf-8"), credential.encode("utf-8"))


def hash_admin_password(password: str) -> str:
    """Digest a plain admin password the way the browser does.

    Args:
        password: Plain admin password from configuration.

    Returns:
        Lowercase hex SHA-256 digest.
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest().lower()


def is_admin_password(
    password: str,
    admin_digest: str | None = None,
    admin_credential: str | None = None,
) -> bool:
    """Check a candidate secret against the configured admin secrets.

    Args:
        password: Candidate client secret.
        admin_digest: Hex digest of the plain admin password.
        admin_credential: Salted admin credential from scripts/genpassword.py.

    Returns:
        True if either configured admin secret matches.
    """
    if admin_digest and hmac.compare_digest(
        password.lower().encode("utf-8"), admin_digest.lower().encode("utf-8")
    ):
        return True

    return bool(admin_credential) and verify_password(admin_credential, password)
