from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Protocol, Union, runtime_checkable

from notmodified._exceptions import InvalidArgument

# 9999-12-31T23:59:59Z, the last instant an HTTP-date can carry
MAX_EPOCH = 253402300799


@runtime_checkable
class SupportsEpoch(Protocol):
    """Anything that can report its own unix epoch, e.g. a row's timestamp column wrapper."""

    def epoch(self) -> Optional[int]: ...


@dataclass(frozen=True)
class RawEpoch:
    value: int

    def resolve(self) -> int:
        return self.value


@dataclass(frozen=True)
class EpochSource:
    source: Any

    def resolve(self) -> Optional[int]:
        source = self.source
        if isinstance(source, datetime):
            if source.tzinfo is None:
                source = source.replace(tzinfo=timezone.utc)
            return math.floor(source.timestamp())

        epoch = source.epoch
        value = epoch() if callable(epoch) else epoch
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidArgument(f"The epoch of {self.source!r} should be a number, but got {value!r}.")
        return math.floor(value)


Timestamp = Union[RawEpoch, EpochSource]
TimestampLike = Union[int, float, datetime, SupportsEpoch, RawEpoch, EpochSource, None]


def as_timestamp(value: TimestampLike) -> Optional[Timestamp]:
    """
    Classify a timestamp-like value.

    Examples:
        >>> as_timestamp(1700000000)
        RawEpoch(value=1700000000)
        >>> as_timestamp(None) is None
        True
    """
    if value is None:
        return None
    if isinstance(value, (RawEpoch, EpochSource)):
        return value
    # bool is an int subclass
    if isinstance(value, bool):
        raise InvalidArgument(f"Expected a timestamp, but got {value!r}.")
    if isinstance(value, int):
        return RawEpoch(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidArgument(f"Expected a finite timestamp, but got {value!r}.")
        return RawEpoch(math.floor(value))
    if isinstance(value, datetime) or hasattr(value, "epoch"):
        return EpochSource(value)
    raise InvalidArgument(f"Expected a unix epoch or an object with an epoch, but got {type(value).__name__}.")


def resolve_epoch(value: TimestampLike) -> Optional[int]:
    timestamp = as_timestamp(value)
    if timestamp is None:
        return None
    epoch = timestamp.resolve()
    if epoch is not None and epoch < 0:
        raise InvalidArgument(f"Timestamps must not predate the unix epoch, but got {epoch}.")
    if epoch is not None and epoch > MAX_EPOCH:
        raise InvalidArgument(f"Timestamps must not be later than year 9999, but got {epoch}.")
    return epoch


def resolve_epochs(values: Iterable[TimestampLike]) -> List[int]:
    epochs = []
    for value in values:
        epoch = resolve_epoch(value)
        if epoch is not None:
            epochs.append(epoch)
    return epochs
