"""Random note names"""

import random
import string
from collections.abc import Callable

NameGenerator = Callable[[], str]

NAME_ALPHABET = string.ascii_lowercase + string.digits
NAME_LENGTH = 10

# Seeded from system entropy once per process; not for security purposes
_rng = random.Random()


def generate_name(length: int = NAME_LENGTH) -> str:
    """Draw ``length`` characters uniformly from ``[a-z0-9]``.

    Existing files are not checked, so a repeated name overwrites the earlier
    note.
    """
    return "".join(_rng.choices(NAME_ALPHABET, k=length))
