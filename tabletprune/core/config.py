"""
Pruner configuration

Settings are passed explicitly to the pruner. ``from_env`` is a convenience
for services that configure the planner through environment variables.
"""

import os
from dataclasses import dataclass, field

from tabletprune.core.errors import ConfigurationError
from tabletprune.pruning.hashing import DEFAULT_BUCKET_HASH, BucketHash

DEFAULT_MAX_COMBINATIONS = 100

ENV_MAX_COMBINATIONS = "TABLETPRUNE_MAX_COMBINATIONS"
ENV_DEDUPE_CANDIDATES = "TABLETPRUNE_DEDUPE_CANDIDATES"


@dataclass(frozen=True)
class PrunerConfig:
    """
    Settings for hash-distribution pruning

    Attributes:
        max_combinations: Ceiling on enumerated value combinations; above it
            the pruner scans every tablet
        dedupe_candidates: Drop repeated IN-list values before sizing the
            cartesian product
        bucket_hash: Hash shared with storage-side row placement
    """

    max_combinations: int = DEFAULT_MAX_COMBINATIONS
    dedupe_candidates: bool = True
    bucket_hash: BucketHash = field(default=DEFAULT_BUCKET_HASH, compare=False)

    def __post_init__(self):
        if isinstance(self.max_combinations, bool) or not isinstance(self.max_combinations, int):
            raise ConfigurationError(
                f"max_combinations must be an integer, got {self.max_combinations!r}"
            )
        if self.max_combinations <= 0:
            raise ConfigurationError(
                f"max_combinations must be positive, got {self.max_combinations}"
            )

    @classmethod
    def from_env(cls, environ=None) -> "PrunerConfig":
        """
        Build config from environment variables

        Unset variables keep their defaults.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        kwargs = {}

        raw = environ.get(ENV_MAX_COMBINATIONS)
        if raw is not None:
            try:
                kwargs["max_combinations"] = int(raw)
            except ValueError:
                raise ConfigurationError(f"{ENV_MAX_COMBINATIONS} must be an integer, got {raw!r}") from None

        raw = environ.get(ENV_DEDUPE_CANDIDATES)
        if raw is not None:
            lowered = raw.strip().lower()
            if lowered in ("1", "true", "yes", "on"):
                kwargs["dedupe_candidates"] = True
            elif lowered in ("0", "false", "no", "off"):
                kwargs["dedupe_candidates"] = False
            else:
                raise ConfigurationError(f"{ENV_DEDUPE_CANDIDATES} must be a boolean, got {raw!r}")

        return cls(**kwargs)
