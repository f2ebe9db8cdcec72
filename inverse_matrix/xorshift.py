# Marsaglia's xorshift96 pseudo random number generator

MASK32 = 0xFFFFFFFF

# Marsaglia's default values for the y and z registers
DEFAULT_Y = 362436069
DEFAULT_Z = 521288629


class Xorshift96:
    """
    Xorshift pseudo random number generator with a period of 2^96 - 1.

    Each instance keeps its own three 32-bit registers, so independent
    streams never interfere with each other.

    See: Marsaglia, "Xorshift RNGs", Journal of Statistical Software 8(14), 2003.
    """

    def __init__(self, seed: int = 1):
        self.seed(seed)

    def seed(self, seed: int) -> None:
        """Reset the stream. Seeds are reduced to 32 bits."""
        self._x = seed & MASK32
        self._y = DEFAULT_Y
        self._z = DEFAULT_Z

    def next_uint32(self) -> int:
        t = (self._x ^ (self._x << 10)) & MASK32
        self._x = self._y
        self._y = self._z
        self._z = (self._z ^ (self._z >> 26)) ^ (t ^ (t >> 5))
        return self._z

    def randint(self, low: int, high: int) -> int:
        """Integer in the closed range [low, high]."""
        if high < low:
            raise ValueError(f"Empty range [{low}, {high}]")
        return self.next_uint32() % (high + 1 - low) + low

    def random(self) -> float:
        """Float in [0, 1)."""
        return self.next_uint32() / (MASK32 + 1)

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.next_uint32()
