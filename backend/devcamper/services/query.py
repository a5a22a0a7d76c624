"""
Advanced results for list endpoints.

Query string language:
    ?select=name,description          pick output fields (id is always kept)
    ?sort=-averageCost,name           order (default: newest first)
    ?page=2&limit=10                  pagination (limit defaults to 25, max 100)
    ?housing=true                     equality filter
    ?averageCost[lte]=10000           operator filter: gt, gte, lt, lte, in
    ?careers[in]=Business,Other       "in" takes a comma separated list; on a
                                      list column it matches any shared value

Only fields listed in a resource's FieldSpec mapping can be filtered or
sorted on; anything else is a BadRequest.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from tortoise.queryset import QuerySet

from ..core.errors import BadRequest

RESERVED_PARAMS = ("select", "sort", "page", "limit")
OPERATORS = ("gt", "gte", "lt", "lte", "in")
DEFAULT_LIMIT = 25
MAX_LIMIT = 100

_PARAM_RE = re.compile(r"^([\w.]+)\[(\w+)\]$")


def as_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


@dataclass(frozen=True)
class FieldSpec:
    """Maps a public (camelCase) field name onto a model column."""
    column: str
    cast: Callable[[str], Any] = str
    sortable: bool = True
    # Column holds a JSON list; only equality and "in" apply, matched in Python
    json_list: bool = False


@dataclass
class ListQuery:
    filters: dict = field(default_factory=dict)
    list_filters: dict = field(default_factory=dict)
    order_by: List[str] = field(default_factory=lambda: ["-created_at", "id"])
    select: Optional[List[str]] = None
    page: int = 1
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value > 0 else default


def _split(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def parse_list_query(
    params: Iterable[Tuple[str, str]],
    fields: Mapping[str, FieldSpec],
) -> ListQuery:
    """Translate raw query params into ORM filters, ordering and paging."""
    query = ListQuery()
    raw: dict = {}
    for key, value in params:
        raw[key] = value

    if raw.get("select"):
        query.select = _split(raw["select"])

    if raw.get("sort"):
        order_by = []
        for item in _split(raw["sort"]):
            desc = item.startswith("-")
            name = item.lstrip("-")
            field_spec = fields.get(name)
            if field_spec is None or not field_spec.sortable:
                raise BadRequest(f"Cannot sort by field '{name}'")
            order_by.append(("-" if desc else "") + field_spec.column)
        order_by.append("id")
        query.order_by = order_by

    query.page = _positive_int(raw.get("page"), 1)
    query.limit = min(_positive_int(raw.get("limit"), DEFAULT_LIMIT), MAX_LIMIT)

    for key, value in raw.items():
        if key in RESERVED_PARAMS:
            continue
        match = _PARAM_RE.match(key)
        name, op = (match.group(1), match.group(2)) if match else (key, None)
        field_spec = fields.get(name)
        if field_spec is None:
            raise BadRequest(f"Cannot filter by field '{name}'")
        if op is not None and op not in OPERATORS:
            raise BadRequest(f"Unsupported filter operator '{op}'")
        if field_spec.json_list:
            if op not in (None, "in"):
                raise BadRequest(f"Unsupported filter operator '{op}' for field '{name}'")
            wanted = _split(value) if op == "in" else [value]
            try:
                query.list_filters[field_spec.column] = {field_spec.cast(v) for v in wanted}
            except ValueError:
                raise BadRequest(f"Invalid value for field '{name}'")
            continue
        try:
            if op == "in":
                cast_value = [field_spec.cast(v) for v in _split(value)]
            else:
                cast_value = field_spec.cast(value)
        except ValueError:
            raise BadRequest(f"Invalid value for field '{name}'")
        lookup = field_spec.column if op is None else f"{field_spec.column}__{op}"
        query.filters[lookup] = cast_value

    return query


def pagination_links(page: int, limit: int, total: int) -> dict:
    """next/prev page descriptors, present only when such a page exists."""
    pagination = {}
    if page * limit < total:
        pagination["next"] = {"page": page + 1, "limit": limit}
    if (page - 1) * limit > 0:
        pagination["prev"] = {"page": page - 1, "limit": limit}
    return pagination


def pick_fields(item: dict, select: Optional[Sequence[str]]) -> dict:
    if not select:
        return item
    keep = {"id", *select}
    return {k: v for k, v in item.items() if k in keep}


def _as_list(value: Any) -> list:
    if isinstance(value, str):
        value = json.loads(value)
    return list(value or ())


async def _match_list_columns(qs: QuerySet, list_filters: Mapping[str, set]) -> QuerySet:
    """Narrow qs to rows whose list columns each share a value with the wanted set."""
    columns = list(list_filters)
    rows = await qs.values_list("id", *columns)
    ids = [
        row[0]
        for row in rows
        if all(list_filters[col].intersection(_as_list(row[i + 1])) for i, col in enumerate(columns))
    ]
    return qs.filter(id__in=ids)


async def advanced_results(
    queryset: QuerySet,
    params: Iterable[Tuple[str, str]],
    fields: Mapping[str, FieldSpec],
    serialize: Callable[[Any], dict],
    prefetch: Sequence[str] = (),
) -> dict:
    """
    Run a filtered, sorted, paginated list query and build the list envelope:
    {success, count, pagination, data}.
    """
    query = parse_list_query(params, fields)
    qs = queryset.filter(**query.filters)
    if query.list_filters:
        qs = await _match_list_columns(qs, query.list_filters)
    total = await qs.count()
    rows = qs.order_by(*query.order_by).offset(query.offset).limit(query.limit)
    if prefetch:
        rows = rows.prefetch_related(*prefetch)
    data = [pick_fields(serialize(row), query.select) for row in await rows]
    return {
        "success": True,
        "count": len(data),
        "pagination": pagination_links(query.page, query.limit, total),
        "data": data,
    }
