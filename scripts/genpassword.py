"""Generate admin secrets for comment moderation.

Prompts for a new admin password and prints:
- its SHA-256 digest, which is what the browser sends as the password,
- a salted credential of that digest, usable as ADMIN_CREDENTIAL so the plain
  password does not have to be stored in the environment.

Usage:
    uv run python -m scripts.genpassword
"""

import getpass
import sys
from pathlib import Path


# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from kaede.comments.security import hash_admin_password, hash_password  # noqa: E402


def main() -> int:
    """Run the interactive prompt."""
    password = getpass.getpass("Please enter your new admin password: ").strip()
    if not password:
        print("Password cannot be empty.", file=sys.stderr)
        return 1

    digest = hash_admin_password(password)

    print()
    print("Client-side digest (what the browser sends):")
    print(digest)
    print()
    print("Your password hashed (ADMIN_CREDENTIAL):")
    print(hash_password(digest))
    return 0


if __name__ == "__main__":
    sys.exit(main())
