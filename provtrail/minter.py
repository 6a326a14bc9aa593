"""
Sharded path minting for audit records.

Records are spread over a fixed-depth directory tree built from the prefix of
their unique token, so a large audit trail never collapses into one flat
container:

    27c605e4-98c6-4240-86be-f1bb1971d694
    -> 27/c6/05/e4/27c605e4-98c6-4240-86be-f1bb1971d694
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidTokenError

DEFAULT_SEGMENTS = 4
DEFAULT_WIDTH = 2
SEPARATOR = "/"


@dataclass(frozen=True)
class PathMinter:
    """Turns a unique token into ``shard1/.../shardN/token``."""

    segments: int = DEFAULT_SEGMENTS
    width: int = DEFAULT_WIDTH

    def __post_init__(self) -> None:
        if self.segments < 0:
            raise ValueError("segments must be >= 0")
        if self.width <= 0:
            raise ValueError("width must be a positive integer")

    @property
    def min_length(self) -> int:
        return self.segments * self.width

    def mint(self, token: str) -> str:
        """
        Mint the sharded path for a token.

        Raises:
            InvalidTokenError: token is too short, contains the separator, or
                its shard prefix is not alphanumeric
        """
        if not token:
            raise InvalidTokenError(token, "empty token")
        if len(token) < self.min_length:
            raise InvalidTokenError(
                token, f"shorter than {self.min_length} characters"
            )
        if SEPARATOR in token:
            raise InvalidTokenError(token, f"contains {SEPARATOR!r}")

        prefix = token[: self.min_length]
        if prefix and not (prefix.isascii() and prefix.isalnum()):
            raise InvalidTokenError(token, f"shard prefix {prefix!r} is not alphanumeric")

        shards = [prefix[i * self.width : (i + 1) * self.width] for i in range(self.segments)]
        return SEPARATOR.join([*shards, token])
