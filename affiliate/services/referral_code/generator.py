"""
Referral code candidate generator.
"""

import random
import secrets
import string


REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits
DEFAULT_CODE_LENGTH = 8

_system_random = secrets.SystemRandom()


def generate_candidate(
    length: int = DEFAULT_CODE_LENGTH,
    rng: random.Random | None = None,
    alphabet: str = REFERRAL_CODE_ALPHABET,
) -> str:
    """
    Generate a referral code candidate.

    Each character is an independent uniform draw from the alphabet
    (A-Z0-9 by default), so characters may repeat within a code.

    Args:
        length: Number of characters
        rng: Random source, defaults to the OS CSPRNG
        alphabet: Symbols to draw from

    Returns:
        Random string of the given length
    """
    if length <= 0:
        raise ValueError("Referral code length must be positive")
    source = rng or _system_random
    return "".join(source.choice(alphabet) for _ in range(length))
