"""Unified resource client and raw passthrough client.

Both hold a reference to a RequestExecutor bound to one connection; neither
owns anything that needs releasing. Each unified operation maps to a fixed
verb, path and documented success status:

    create  POST    /unified/<name>          201
    upsert  PUT     /unified/<name>          200
    list    GET     /unified/<name>          200
    get     GET     /unified/<name>/<id>     200
    update  PATCH   /unified/<name>/<id>     204
    count   GET     /unified/<name>/count    200
    delete  DELETE  /unified/<name>/<id>     204
"""

from typing import Any, Dict, Generic, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import quote

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from picaunified.core.executor import HEADERS_KEY, STATUS_CODE_KEY, RequestExecutor
from picaunified.core.query import options_to_query
from picaunified.models import RequestOptions

T = TypeVar("T")

UNIFIED_PREFIX = "/unified"

Entity = Union[BaseModel, Mapping[str, Any]]


def _dump_entity(entity: Optional[Entity]) -> Optional[Dict[str, Any]]:
    """Serialize an entity to a JSON-ready dict."""
    if entity is None:
        return None
    if isinstance(entity, BaseModel):
        return entity.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(entity, Mapping):
        return to_jsonable_python(dict(entity))
    raise TypeError(f"Unsupported entity type: {type(entity).__name__}")


class ResourceClient(Generic[T]):
    """CRUD client for one unified resource on one connection."""

    def __init__(
        self,
        executor: RequestExecutor,
        resource_name: str,
        model: Optional[Type[T]] = None,
    ):
        if not resource_name or "/" in resource_name:
            raise ValueError(f"Invalid resource name: {resource_name!r}")
        self._executor = executor
        self.resource_name = resource_name
        self.model = model
        self.base_path = f"{UNIFIED_PREFIX}/{resource_name}"

    def __repr__(self) -> str:
        return f"ResourceClient(resource_name={self.resource_name!r})"

    def _item_path(self, record_id: Any) -> str:
        return f"{self.base_path}/{quote(str(record_id), safe='')}"

    async def create(self, entity: Entity, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        """Create a record. Reported status: 201."""
        return await self._executor.send(
            "POST", self.base_path, _dump_entity(entity), options, expected_status=201
        )

    async def upsert(self, entity: Entity, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        """Create or replace a record. Reported status: 200."""
        return await self._executor.send(
            "PUT", self.base_path, _dump_entity(entity), options, expected_status=200
        )

    async def list(
        self,
        list_filter: Any = None,
        options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        """List records; the filter becomes query parameters."""
        return await self._executor.send_list(
            "GET", self.base_path, None, options, list_filter, expected_status=200
        )

    async def get(self, record_id: Any, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        """Fetch one record by id."""
        return await self._executor.send(
            "GET", self._item_path(record_id), None, options, expected_status=200
        )

    async def update(
        self,
        record_id: Any,
        entity: Entity,
        options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        """Partially update a record. Reported status: 204."""
        return await self._executor.send(
            "PATCH",
            self._item_path(record_id),
            _dump_entity(entity),
            options,
            expected_status=204,
        )

    async def count(self, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        """Count records."""
        return await self._executor.send(
            "GET", f"{self.base_path}/count", None, options, expected_status=200
        )

    async def delete(
        self,
        record_id: Any,
        delete_options: Any = None,
        options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        """Delete a record.

        Every delete option is sent as a query parameter; None values go out
        empty rather than being dropped.
        """
        return await self._executor.send(
            "DELETE",
            self._item_path(record_id),
            None,
            options,
            options_to_query(delete_options),
            expected_status=204,
        )

    def parse(self, envelope: Mapping[str, Any]) -> Any:
        """Build the bound model from a single-record envelope.

        Drops the envelope's own "headers" and "statusCode" fields. Without a
        bound pydantic model the remaining fields are returned as a dict.
        """
        fields = {k: v for k, v in envelope.items() if k not in (HEADERS_KEY, STATUS_CODE_KEY)}
        if self.model is not None and issubclass(self.model, BaseModel):
            return self.model.model_validate(fields)
        return fields


class PassthroughClient:
    """Raw access to the upstream API of one connection."""

    def __init__(self, executor: RequestExecutor):
        self._executor = executor

    def __repr__(self) -> str:
        return "PassthroughClient()"

    async def call(
        self,
        method: str,
        path: str,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
        query_params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Forward a request to ``/passthrough/<path>``.

        The upstream body comes back nested under "passthrough" with the
        upstream's actual status code.
        """
        options = RequestOptions(
            passthrough_headers=dict(headers or {}),
            passthrough_query=dict(query_params or {}),
        )
        if isinstance(data, (BaseModel, Mapping)):
            payload = _dump_entity(data)
        else:
            payload = to_jsonable_python(data)
        return await self._executor.send(
            method.upper(),
            f"/passthrough/{path.lstrip('/')}",
            payload,
            options,
        )
