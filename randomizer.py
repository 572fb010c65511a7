"""Order-randomizing primitive shared by every exercise presentation."""

import random
from typing import Sequence, TypeVar

from config import RandomizerConfig

T = TypeVar("T")

# Process-wide source used when no generator is injected.
_process_rng = random.Random()


class Randomizer:
    """Shuffles and draws using an injectable random source."""

    def __init__(
        self,
        rng: random.Random | None = None,
        config: RandomizerConfig | None = None,
    ):
        self.rng = rng if rng is not None else _process_rng
        self.config = config or RandomizerConfig()

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a uniformly random permutation of a copy of `items`."""
        result = list(items)
        self.rng.shuffle(result)
        return result

    def shuffle_away_from(
        self,
        items: Sequence[T],
        reference: Sequence[T] | None = None,
        max_attempts: int | None = None,
    ) -> list[T]:
        """Shuffle `items`, redrawing until the result differs from `reference`.

        Args:
            items: Items to permute (not mutated).
            reference: Order that must not be returned. Defaults to `items`.
            max_attempts: Redraw cap. Defaults to the configured cap.

        Returns:
            A permutation different from `reference` whenever one exists.
            With one item or fewer the original order is returned.
        """
        reference = list(items if reference is None else reference)
        if len(items) <= 1:
            return list(items)

        attempts = max_attempts or self.config.max_resample_attempts
        result = self.shuffle(items)
        for _ in range(attempts - 1):
            if result != reference:
                return result
            result = self.shuffle(items)

        if result == reference:
            # Rotating distinct items always yields a different order.
            result = result[1:] + result[:1]
        return result

    def choice(self, items: Sequence[T]) -> T:
        return self.rng.choice(items)

    def sample(self, items: Sequence[T], k: int) -> list[T]:
        return self.rng.sample(list(items), k)
