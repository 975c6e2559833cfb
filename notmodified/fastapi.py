from __future__ import annotations

import logging
import typing as t

from typing_extensions import assert_never

from notmodified._config import ConditionalOptions
from notmodified._core._freshness import HTTP_NOT_MODIFIED, Continue, ShortCircuit, evaluate_freshness
from notmodified._core._headers import Headers
from notmodified._core.models import TimestampLike
from notmodified._utils import filter_mapping, format_http_date

try:
    import fastapi
except ImportError as e:
    raise ImportError(
        "fastapi is required to use notmodified.fastapi module. "
        "Please install notmodified with the 'fastapi' extra, "
        "e.g., 'pip install notmodified[fastapi]'."
    ) from e

logger = logging.getLogger(__name__)


class NotModified(fastapi.HTTPException):
    """
    Raised to stop an endpoint whose client already holds a fresh copy.

    FastAPI answers a 304 exception with an empty body and the exception's
    headers. `headers` should carry what the endpoint already set on its
    response, such as `Cache-Control` or `Vary`; `Last-Modified` is always
    included.
    """

    def __init__(self, last_modified: int, headers: t.Optional[t.Mapping[str, str]] = None) -> None:
        kept = filter_mapping(headers or {}, ["Last-Modified"])
        super().__init__(
            status_code=HTTP_NOT_MODIFIED,
            headers={**kept, "Last-Modified": format_http_date(last_modified)},
        )
        self.last_modified = last_modified


class _FastAPIResponse:
    def __init__(self, response: fastapi.Response) -> None:
        self._response = response

    def set_last_modified(self, epoch: int) -> None:
        self._response.headers["Last-Modified"] = format_http_date(epoch)

    def set_status(self, status_code: int) -> None:
        self._response.status_code = status_code


class Detacher:
    def __init__(
        self,
        request: fastapi.Request,
        response: fastapi.Response,
        options: ConditionalOptions | None = None,
    ) -> None:
        self._request = request
        self._response = response
        self._options = options or ConditionalOptions()

    def detach_if_not_modified_since(self, *timestamps: TimestampLike) -> Continue:
        """
        Set `Last-Modified` to the newest timestamp and stop if the client is fresh.

        Args:
            *timestamps: Unix epochs, `datetime` values or objects with an
                `epoch` accessor. `None` values are ignored.

        Returns:
            The `Continue` decision when the endpoint should build its response.

        Raises:
            NotModified: When the request's `If-Modified-Since` is not older
                than the newest timestamp.
            InvalidArgument: When no defined timestamp was given.

        Example:
            ```python
            @app.get("/articles/{article_id}")
            async def get_article(article_id: int, detacher: Detacher = conditional()):
                article = await load_article(article_id)
                detacher.detach_if_not_modified_since(article.updated_at, article.author.updated_at)
                return render(article)
            ```
        """
        method = self._request.method
        if self._options.supports(method):
            request_headers = Headers.from_raw(self._request.headers.raw)
        else:
            logger.debug("Ignoring If-Modified-Since for method=%s", method)
            request_headers = Headers({})

        decision = evaluate_freshness(timestamps, request_headers, _FastAPIResponse(self._response))

        if isinstance(decision, ShortCircuit):
            logger.debug("Detaching: method=%s path=%s", method, self._request.url.path)
            kept = Headers.from_raw(self._response.headers.raw).without(self._options.strip_headers)
            raise NotModified(decision.last_modified, headers=dict(kept))
        elif isinstance(decision, Continue):
            return decision
        else:
            assert_never(decision)


def conditional(options: ConditionalOptions | None = None) -> t.Any:
    """
    Inject a `Detacher` into FastAPI endpoints.

    Args:
        options: Which request methods honour `If-Modified-Since`.
            Defaults to GET and HEAD.

    Returns:
        A dependency resolving to a `Detacher` bound to the current request.

    Examples:
        >>> from fastapi import FastAPI
        >>> from notmodified.fastapi import Detacher, conditional
        >>>
        >>> app = FastAPI()
        >>>
        >>> @app.get("/reports/latest")
        >>> async def latest_report(detacher: Detacher = conditional()):
        ...     report = await fetch_latest_report()
        ...     detacher.detach_if_not_modified_since(report.generated_at)
        ...     return report.as_dict()
    """

    def make_detacher(request: fastapi.Request, response: fastapi.Response) -> Detacher:
        return Detacher(request, response, options)

    return fastapi.Depends(make_detacher)
