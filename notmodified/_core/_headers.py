from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Protocol,
    Tuple,
    Union,
    runtime_checkable,
)

from notmodified._utils import HEADERS_ENCODING, filter_mapping, format_http_date, parse_date

__all__ = (
    "Headers",
    "MutableHeaders",
    "ReadableHeaders",
    "Response",
)


@runtime_checkable
class ReadableHeaders(Protocol):
    """Request side of a conditional exchange."""

    def if_modified_since(self) -> Optional[int]: ...


@runtime_checkable
class MutableHeaders(Protocol):
    """Response side of a conditional exchange."""

    def set_last_modified(self, epoch: int) -> None: ...

    def set_status(self, status_code: int) -> None: ...


class Headers(MutableMapping[str, str]):
    def __init__(self, headers: Mapping[str, Union[str, List[str]]]) -> None:
        self._headers = {k.lower(): ([v] if isinstance(v, str) else v[:]) for k, v in headers.items()}

    @classmethod
    def from_raw(cls, raw_headers: List[Tuple[bytes, bytes]]) -> "Headers":
        headers = cls({})
        for key, value in raw_headers:
            headers[key.decode(HEADERS_ENCODING)] = value.decode(HEADERS_ENCODING)
        return headers

    def raw(self) -> List[Tuple[bytes, bytes]]:
        return [
            (key.encode(HEADERS_ENCODING), value.encode(HEADERS_ENCODING))
            for key, values in self._headers.items()
            for value in values
        ]

    def get_list(self, key: str) -> Optional[List[str]]:
        return self._headers.get(key.lower(), None)

    def without(self, keys: Iterable[str]) -> "Headers":
        return Headers(filter_mapping(self._headers, keys))

    def _get_date(self, key: str) -> Optional[int]:
        values = self.get_list(key)
        if not values:
            return None
        return parse_date(values[0])

    def if_modified_since(self) -> Optional[int]:
        """
        The `If-Modified-Since` header as a unix epoch.

        RFC 9110 Section 13.1.3: "A recipient MUST ignore the If-Modified-Since
        header field if the received field value is not a valid HTTP-date."
        Missing and malformed values therefore both come back as None.
        """
        return self._get_date("If-Modified-Since")

    def last_modified(self) -> Optional[int]:
        return self._get_date("Last-Modified")

    def set_last_modified(self, epoch: int) -> None:
        self._headers["last-modified"] = [format_http_date(epoch)]

    def remove_last_modified(self) -> None:
        self._headers.pop("last-modified", None)

    def __getitem__(self, key: str) -> str:
        return ", ".join(self._headers[key.lower()])

    def __setitem__(self, key: str, value: str) -> None:
        self._headers.setdefault(key.lower(), []).append(value)

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return repr(self._headers)

    def __str__(self) -> str:
        return str(self._headers)

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers  # type: ignore


@dataclass
class Response:
    """
    Response state owned by a single request/response exchange.
    """

    status_code: int = 200
    headers: Headers = field(default_factory=lambda: Headers({}))

    def set_last_modified(self, epoch: int) -> None:
        self.headers.set_last_modified(epoch)

    def set_status(self, status_code: int) -> None:
        self.status_code = status_code
