from __future__ import annotations

import random
import secrets
import string

PASSWORD_CHARACTERS = string.ascii_uppercase + string.ascii_lowercase + string.digits + "@#%"
PASSWORD_LENGTH = 12

OTP_CHARACTERS = string.digits
OTP_LENGTH = 6

# Process-wide CSPRNG shared by every generator that is not given its own source
_system_random = secrets.SystemRandom()


class CredentialGenerator:
    """Draws random passwords and numeric OTP codes from fixed alphabets.

    ``rng`` defaults to the process-wide ``secrets.SystemRandom``; tests may
    inject a seeded ``random.Random`` instead.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else _system_random

    def _draw(self, alphabet: str, length: int) -> str:
        return "".join(self._rng.choice(alphabet) for _ in range(length))

    def generate_password(self) -> str:
        return self._draw(PASSWORD_CHARACTERS, PASSWORD_LENGTH)

    def generate_otp(self) -> str:
        return self._draw(OTP_CHARACTERS, OTP_LENGTH)


credential_generator = CredentialGenerator()


def get_credential_generator() -> CredentialGenerator:
    return credential_generator
