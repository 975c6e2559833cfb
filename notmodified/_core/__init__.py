from notmodified._core._freshness import (
    AnyDecision as AnyDecision,
    Continue as Continue,
    Decision as Decision,
    ShortCircuit as ShortCircuit,
    evaluate_freshness as evaluate_freshness,
    is_not_modified as is_not_modified,
)
from notmodified._core._headers import (
    Headers as Headers,
    MutableHeaders as MutableHeaders,
    ReadableHeaders as ReadableHeaders,
    Response as Response,
)
from notmodified._core.models import (
    EpochSource as EpochSource,
    RawEpoch as RawEpoch,
    SupportsEpoch as SupportsEpoch,
    TimestampLike as TimestampLike,
    as_timestamp as as_timestamp,
    resolve_epoch as resolve_epoch,
    resolve_epochs as resolve_epochs,
)

__all__ = (
    ## Decisions
    "AnyDecision",
    "Continue",
    "Decision",
    "ShortCircuit",
    "evaluate_freshness",
    "is_not_modified",
    ## Timestamps
    "EpochSource",
    "RawEpoch",
    "SupportsEpoch",
    "TimestampLike",
    "as_timestamp",
    "resolve_epoch",
    "resolve_epochs",
    ## Headers
    "Headers",
    "MutableHeaders",
    "ReadableHeaders",
    "Response",
)
