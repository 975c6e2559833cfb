from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from notmodified._core._headers import MutableHeaders, ReadableHeaders
from notmodified._core.models import TimestampLike, resolve_epochs
from notmodified._exceptions import InvalidArgument

HTTP_NOT_MODIFIED = 304
logger = logging.getLogger("notmodified.core.freshness")


@dataclass
class Decision:
    last_modified: int
    """The epoch advertised in the `Last-Modified` header."""


@dataclass
class Continue(Decision):
    """
    The client has no usable cached copy; generate the response as usual.

    Returned when the request is not conditional, when `If-Modified-Since`
    is malformed, or when the resource changed after the client's date.
    """


@dataclass
class ShortCircuit(Decision):
    """
    The client's cached copy is still fresh.

    The response status has already been set to 304. The caller must stop
    generating content and send the response as it stands.
    """

    status_code: int = HTTP_NOT_MODIFIED


AnyDecision = Union[Continue, ShortCircuit]


def is_not_modified(since: Optional[int], last_modified: int) -> bool:
    """
    Evaluate an `If-Modified-Since` precondition.

    RFC 9110 Section 13.2.2, step 4:
    https://www.rfc-editor.org/rfc/rfc9110.html#section-13.2.2

    "When the method is GET or HEAD and If-None-Match is not present, evaluate
    the If-Modified-Since precondition: if false, respond 304 (Not Modified)."

    The precondition is false when the selected representation's last
    modification date is earlier than or equal to the date provided, so the
    comparison is inclusive.

    Examples:
        >>> is_not_modified(1700000000, 1700000000)
        True
        >>> is_not_modified(1699999999, 1700000000)
        False
        >>> is_not_modified(None, 1700000000)
        False
    """
    return since is not None and since >= last_modified


def evaluate_freshness(
    timestamps: Iterable[TimestampLike],
    request_headers: ReadableHeaders,
    response: MutableHeaders,
) -> AnyDecision:
    """
    Advertise the newest of `timestamps` and decide whether to short-circuit.

    `Last-Modified` is written on every call, including the ones that
    continue with a full response. On `ShortCircuit` the response status is
    set to 304; stopping the request is left to the caller.

    Parameters:
    ----------
    timestamps : Iterable[TimestampLike]
        Unix epochs, `datetime` values or objects with an `epoch` accessor.
        `None` entries and accessors returning `None` are ignored.
    request_headers : ReadableHeaders
        Source of the client's `If-Modified-Since` date.
    response : MutableHeaders
        Receives `Last-Modified` and, when fresh, the 304 status.

    Raises:
    ------
    InvalidArgument
        If no timestamp remains once undefined entries are dropped.

    Examples:
    --------
    >>> from notmodified import Headers, Response
    >>> request_headers = Headers({"If-Modified-Since": "Tue, 14 Nov 2023 22:13:20 GMT"})
    >>> response = Response()
    >>> evaluate_freshness([1700000000], request_headers, response)
    ShortCircuit(last_modified=1700000000, status_code=304)
    >>> response.status_code
    304
    """
    epochs = resolve_epochs(timestamps)
    if not epochs:
        raise InvalidArgument("At least one defined timestamp is required.")

    max_time = max(epochs)
    response.set_last_modified(max_time)

    since = request_headers.if_modified_since()
    if since is None:
        logger.debug("No usable If-Modified-Since header, last_modified=%d", max_time)
        return Continue(last_modified=max_time)

    if is_not_modified(since, max_time):
        logger.debug("Not modified: since=%d last_modified=%d", since, max_time)
        response.set_status(HTTP_NOT_MODIFIED)
        return ShortCircuit(last_modified=max_time)

    logger.debug("Modified: since=%d last_modified=%d", since, max_time)
    return Continue(last_modified=max_time)
