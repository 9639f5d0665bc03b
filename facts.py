"""The fixed universe of multiplication facts.

Facts are the 121 pairs (a, b) with both factors in 0..10. Every fact has a
canonical string key of the form ``"{a}x{b}"`` which is what the rest of the
system stores and passes around.
"""

from pydantic import BaseModel, ConfigDict, Field

FACTOR_MIN = 0
FACTOR_MAX = 10
KEY_SEPARATOR = "x"


class Fact(BaseModel):
    """A single multiplication problem a x b."""

    model_config = ConfigDict(frozen=True)

    a: int = Field(ge=FACTOR_MIN, le=FACTOR_MAX)
    b: int = Field(ge=FACTOR_MIN, le=FACTOR_MAX)

    @property
    def key(self) -> str:
        return make_key(self.a, self.b)

    @property
    def answer(self) -> int:
        return self.a * self.b

    def __str__(self) -> str:
        return f"{self.a} × {self.b}"


def make_key(a: int, b: int) -> str:
    """Build the canonical key for the fact a x b."""
    return f"{a}{KEY_SEPARATOR}{b}"


def parse_key(key: object) -> Fact | None:
    """Parse a canonical key back into a Fact.

    Returns None for anything that is not ``"<int>x<int>"`` with both factors
    inside the fact space. Persisted data is untrusted, so this never raises.
    """
    if not isinstance(key, str):
        return None

    parts = key.split(KEY_SEPARATOR)
    if len(parts) != 2:
        return None

    try:
        a, b = int(parts[0]), int(parts[1])
    except ValueError:
        return None

    if not (FACTOR_MIN <= a <= FACTOR_MAX and FACTOR_MIN <= b <= FACTOR_MAX):
        return None
    # Reject non-canonical spellings such as " 3x4" or "03x4"
    if make_key(a, b) != key:
        return None
    return Fact(a=a, b=b)


def is_valid_key(key: object) -> bool:
    return parse_key(key) is not None


def _build_fact_space() -> list[Fact]:
    facts = []
    for a in range(FACTOR_MIN, FACTOR_MAX + 1):
        for b in range(FACTOR_MIN, FACTOR_MAX + 1):
            facts.append(Fact(a=a, b=b))
    return facts


ALL_FACTS: list[Fact] = _build_fact_space()
ALL_KEYS: list[str] = [fact.key for fact in ALL_FACTS]
FACT_COUNT = len(ALL_FACTS)
