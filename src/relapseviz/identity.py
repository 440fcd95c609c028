"""Node identity suffixes for grammar graphs.

Suffixes are drawn from a seeded ``random.Random`` owned by the generator, so
translating the same grammar twice yields identical node names while sibling
subtrees of the same variant still get distinct ones. The plain generator
accepts the small chance of a repeated 64-bit draw; use
``UniqueIdentityGenerator`` when that is not acceptable.
"""

import random

DEFAULT_SEED = 0


class IdentityGenerator:
    """Iterator of base-10 suffix strings."""

    def __init__(self, seed: int = DEFAULT_SEED):
        self.seed = seed
        self._random = random.Random(seed)

    def __iter__(self):
        return self

    def __next__(self) -> str:
        return str(self._random.getrandbits(64))


class UniqueIdentityGenerator(IdentityGenerator):
    """Identity generator that redraws instead of repeating a suffix."""

    def __init__(self, seed: int = DEFAULT_SEED):
        super().__init__(seed)
        self._issued: set[str] = set()

    def __next__(self) -> str:
        suffix = super().__next__()
        while suffix in self._issued:
            suffix = super().__next__()
        self._issued.add(suffix)
        return suffix
