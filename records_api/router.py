"""
Request routing for the records API.

`RequestRouter` maps an already parsed request onto one of four behaviours:

- ``/`` (or an empty path): every record
- ``/read``: records whose name equals the ``name`` parameter
- ``/add``: insert one record with the ``name`` parameter
- anything else: 404

The HTTP method is not part of routing. Any failure raised by the data layer
is turned into a 500 response carrying the error text, and every request is
logged with its method, path and status code whatever the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

from records_api.domain.models import ApiResponse, Confirmation, ErrorMessage, RecordList
from records_api.repository import RecordRepository
from records_api.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_NAME = "john"
NOT_FOUND_MESSAGE = "The requested route doesn't exist :("

Handler = Callable[[str], Awaitable[ApiResponse]]


@dataclass(frozen=True)
class RoutedResponse:
    """Status code plus the response variant to serialize."""

    status_code: int
    body: ApiResponse


class RequestRouter:
    """
    Dispatch requests by path to database-backed handlers.

    The repository (and the session inside it) is injected once and shared by
    every request the router serves.
    """

    def __init__(self, repository: RecordRepository, default_name: str = DEFAULT_NAME) -> None:
        self.repository = repository
        self.default_name = default_name
        self._routes: Dict[str, Handler] = {
            "": self.list_records,
            "/": self.list_records,
            "/read": self.read_records,
            "/add": self.add_record,
        }

    async def dispatch(
        self,
        method: str,
        path: str,
        name: Optional[str] = None,
        target: Optional[str] = None,
    ) -> RoutedResponse:
        """
        Route one request and produce its response.

        Parameters
        ----------
        method : str
            HTTP method, only used for logging.
        path : str
            URL path without the query string.
        name : str, optional
            The ``name`` query parameter; the default applies only when it
            is absent, so an empty string is used as given.
        target : str, optional
            Path plus query string as requested, for logging. Defaults to
            ``path``.

        Returns
        -------
        RoutedResponse
            200 on success, 404 for unknown paths, 500 on any data failure.
        """
        resolved_name = self.default_name if name is None else name
        handler = self._routes.get(path)

        if handler is None:
            routed = RoutedResponse(404, ErrorMessage(message=NOT_FOUND_MESSAGE))
        else:
            try:
                routed = RoutedResponse(200, await handler(resolved_name))
            except Exception as exc:
                log.exception("Request %s %s failed", method, target or path)
                routed = RoutedResponse(
                    500, ErrorMessage(message=f"Some error happened :(( -- (error: {exc})")
                )

        log.info(
            "Handled request: %s %s %d",
            method,
            target or path,
            routed.status_code,
            extra={"method": method, "path": target or path, "status_code": routed.status_code},
        )
        return routed

    async def list_records(self, _name: str) -> RecordList:
        result = await self.repository.fetch_all()
        return RecordList.from_rows(result.rows)

    async def read_records(self, name: str) -> RecordList:
        result = await self.repository.fetch_by_name(name)
        return RecordList.from_rows(result.rows)

    async def add_record(self, name: str) -> Confirmation:
        inserted = await self.repository.insert(name)
        return Confirmation(message=f"Inserted {inserted} row with name '{name}'")


__all__ = [
    "DEFAULT_NAME",
    "NOT_FOUND_MESSAGE",
    "RequestRouter",
    "RoutedResponse",
]
