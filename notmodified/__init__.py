__version__ = "0.2.2"

from notmodified._config import ConditionalOptions as ConditionalOptions
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
    resolve_epoch as resolve_epoch,
)
from notmodified._exceptions import InvalidArgument as InvalidArgument, NotModifiedError as NotModifiedError

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
    "resolve_epoch",
    ## Headers
    "Headers",
    "MutableHeaders",
    "ReadableHeaders",
    "Response",
    ## Options
    "ConditionalOptions",
    ## Exceptions
    "NotModifiedError",
    "InvalidArgument",
)
