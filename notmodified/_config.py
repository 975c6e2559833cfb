from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ConditionalOptions:
    """
    Configuration for the framework integrations.

    Attributes:
    ----------
    supported_methods : list[str]
        HTTP methods for which ``If-Modified-Since`` is honoured.

        RFC 9110 Section 13.1.3: If-Modified-Since
        https://www.rfc-editor.org/rfc/rfc9110.html#section-13.1.3

        "A recipient MUST ignore If-Modified-Since if the request contains an
        If-None-Match header field [...] or if the request method is neither
        GET nor HEAD."

        For other methods ``Last-Modified`` is still written, but the request
        is never short-circuited.

        Default: ["GET", "HEAD"]

    strip_headers : list[str]
        Representation headers removed from a 304 built by the ASGI middleware
        or the FastAPI integration.

        Default: ["Content-Type", "Content-Length", "Content-Disposition", "Transfer-Encoding"]

        Examples:
        --------
        >>> options = ConditionalOptions()
        >>> options.supported_methods
        ['GET', 'HEAD']
    """

    supported_methods: list[str] = field(default_factory=lambda: ["GET", "HEAD"])
    """HTTP methods for which conditional requests are evaluated."""

    strip_headers: list[str] = field(
        default_factory=lambda: [
            "Content-Type",
            "Content-Length",
            "Content-Disposition",
            "Transfer-Encoding",
        ]
    )
    """Headers dropped from a generated 304 response."""

    def supports(self, method: str) -> bool:
        """Whether `If-Modified-Since` is evaluated for `method` (case-insensitive)."""
        return method.upper() in {m.upper() for m in self.supported_methods}
