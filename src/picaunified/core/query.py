"""Query-parameter composition.

A structured filter is flattened to string key/value pairs by a converter,
then the caller's passthrough query is merged on top.
"""

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import BaseModel

from picaunified.models import RequestOptions

QueryConverter = Callable[[Any], Dict[str, str]]


def format_query_value(value: Any) -> str:
    """Format one value as a query-string value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return format_query_value(value.value)
    if isinstance(value, (list, tuple)):
        return ",".join(format_query_value(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def filter_to_query(filter_obj: Any) -> Dict[str, str]:
    """Flatten a filter (pydantic model or mapping) to a string map.

    None values are skipped; an absent filter yields an empty map.
    """
    if filter_obj is None:
        return {}

    if isinstance(filter_obj, BaseModel):
        values = filter_obj.model_dump(by_alias=True, exclude_none=True)
    elif isinstance(filter_obj, Mapping):
        values = filter_obj
    else:
        raise TypeError(f"Cannot convert {type(filter_obj).__name__} to query parameters")

    return {
        str(key): format_query_value(value)
        for key, value in values.items()
        if value is not None
    }


def options_to_query(options_obj: Any) -> Dict[str, str]:
    """Flatten delete options to a string map, keeping every key.

    Unlike ``filter_to_query`` nothing is dropped: a None value is sent as
    an empty string.
    """
    if options_obj is None:
        return {}

    if isinstance(options_obj, BaseModel):
        values = options_obj.model_dump(by_alias=True)
    elif isinstance(options_obj, Mapping):
        values = options_obj
    else:
        raise TypeError(f"Cannot convert {type(options_obj).__name__} to query parameters")

    return {
        str(key): "" if value is None else format_query_value(value)
        for key, value in values.items()
    }


def compose_query(
    query_params: Any = None,
    options: Optional[RequestOptions] = None,
    converter: QueryConverter = filter_to_query,
) -> Dict[str, str]:
    """Build the query map for one request.

    The converted filter comes first; passthrough query values win on key
    collisions.
    """
    params = dict(converter(query_params)) if query_params is not None else {}

    if options and options.passthrough_query:
        params.update(options.passthrough_query)

    return params
