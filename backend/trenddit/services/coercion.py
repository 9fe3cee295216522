"""Response coercion — raw model text in, schema-valid domain objects out.

Every boundary crossing from provider text to a domain type goes through
`coerce()` with one declarative `ObjectSchema` per domain type. Coercion is
lenient per field and strict per document:

  - Unparseable text, or a root that is neither an array nor an object with
    the schema's collection key  → MALFORMED_RESPONSE
  - Field present and valid                → kept
  - Number outside its declared range      → clamped to the nearest bound
  - Enum value not in the declared set     → documented default
  - Field missing or of the wrong type     → schema default, result degraded
  - Non-string or blank list entries      → dropped, result degraded
  - Identity field missing                 → item dropped (collection) or
                                             MALFORMED_RESPONSE (single object)
  - Nothing left after dropping            → EMPTY_RESULT

If `coerce()` returns, every item satisfies its schema; callers never
re-validate.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel

from .errors import ErrorKind, GenerationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Number = Union[int, float]


# ---------------------------------------------------------------------------
# Field specs
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TextField:
    name: str
    default: str = ""
    required: bool = False


@dataclass(frozen=True)
class OptionalTextField:
    """Text that may legitimately be absent (e.g. vendor for a build approach)."""

    name: str


@dataclass(frozen=True)
class NumberField:
    name: str
    default: Number
    lo: Optional[Number] = None
    hi: Optional[Number] = None
    required: bool = False


@dataclass(frozen=True)
class EnumField:
    name: str
    values: Tuple[str, ...]
    default: str
    required: bool = False


@dataclass(frozen=True)
class StringListField:
    name: str
    default: Tuple[str, ...]
    min_items: int = 0


@dataclass(frozen=True)
class ObjectField:
    name: str
    schema: "ObjectSchema"


FieldSpec = Union[TextField, OptionalTextField, NumberField, EnumField, StringListField, ObjectField]


@dataclass(frozen=True)
class ObjectSchema:
    """Declared shape of one domain object.

    `collection_key` marks a list schema: the root may be a bare array or an
    object holding the array under that key. `finalize` runs on the coerced
    dict before the pydantic model is built (cross-field fixes).
    """

    name: str
    fields: Tuple[FieldSpec, ...]
    model: Optional[Type[BaseModel]] = None
    collection_key: Optional[str] = None
    finalize: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None


@dataclass
class CoercedResult(Generic[T]):
    """Domain value plus a record of what coercion had to repair."""

    value: T
    degraded: bool = False
    defaulted_fields: List[str] = field(default_factory=list)
    clamped_fields: List[str] = field(default_factory=list)
    dropped_items: int = 0


class _MissingIdentity(Exception):
    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.path = path


class _Tracker:
    def __init__(self) -> None:
        self.defaulted: List[str] = []
        self.clamped: List[str] = []


# ---------------------------------------------------------------------------
# JSON sanitizer — extracts the JSON document from LLM output
# ---------------------------------------------------------------------------
_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def sanitize_json(raw: str) -> str:
    """Extract a JSON object or array from raw LLM output.

    Handles:
      - Markdown fences (```json ... ```)
      - Leading/trailing whitespace and BOM
      - Prose before/after the JSON document
      - Trailing commas before } or ]

    Raises ValueError if no JSON document is found.
    """
    text = (raw or "").strip().lstrip("\ufeff").strip()
    text = _FENCE_RE.sub("", text).strip()

    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        raise ValueError("no '{' or '[' found")
    start = min(starts)
    closer = "}" if text[start] == "{" else "]"
    end = text.rfind(closer)
    if end < start:
        raise ValueError(f"no closing {closer!r} found")

    return _TRAILING_COMMA_RE.sub(r"\1", text[start : end + 1])


def parse_json_document(raw_text: str) -> Any:
    try:
        return json.loads(sanitize_json(raw_text))
    except ValueError as exc:
        # json.JSONDecodeError is a ValueError
        logger.warning("[COERCE] JSON parse failed: %s — raw (first 300 chars): %r", exc, (raw_text or "")[:300])
        raise GenerationError(
            ErrorKind.MALFORMED_RESPONSE,
            f"Model output is not valid JSON: {exc}",
        ) from exc


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------
def _as_number(value: Any) -> Optional[Number]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            float(value)
        except OverflowError:
            # JSON integers are unbounded; treat one past float range as infinite
            return math.copysign(math.inf, value)
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(parsed):
            return None
        return int(parsed) if parsed.is_integer() and "." not in value else parsed
    return None


def _coerce_field(spec: FieldSpec, raw: Dict[str, Any], path: str, tracker: _Tracker) -> Any:
    present = spec.name in raw
    value = raw.get(spec.name)
    where = f"{path}.{spec.name}" if path else spec.name

    if isinstance(spec, OptionalTextField):
        if isinstance(value, str) and value.strip():
            return value
        return None

    if isinstance(spec, TextField):
        if isinstance(value, str) and value.strip():
            return value
        if spec.required:
            raise _MissingIdentity(where)
        tracker.defaulted.append(where)
        return spec.default

    if isinstance(spec, NumberField):
        number = _as_number(value) if present else None
        if number is not None and math.isinf(number):
            bound = spec.hi if number > 0 else spec.lo
            if bound is not None:
                tracker.clamped.append(where)
                return bound
            number = None
        if number is None:
            if spec.required:
                raise _MissingIdentity(where)
            tracker.defaulted.append(where)
            return spec.default
        clamped = number
        if spec.lo is not None and clamped < spec.lo:
            clamped = spec.lo
        if spec.hi is not None and clamped > spec.hi:
            clamped = spec.hi
        if clamped != number:
            tracker.clamped.append(where)
        return clamped

    if isinstance(spec, EnumField):
        if isinstance(value, str):
            normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
            for allowed in spec.values:
                if normalized == allowed.replace("-", "_"):
                    return allowed
        if spec.required:
            raise _MissingIdentity(where)
        tracker.defaulted.append(where)
        return spec.default

    if isinstance(spec, StringListField):
        if isinstance(value, list):
            items = [item for item in value if isinstance(item, str) and item.strip()]
            if len(items) >= spec.min_items:
                if len(items) < len(value):
                    tracker.defaulted.append(where)
                return items
        tracker.defaulted.append(where)
        return list(spec.default)

    if isinstance(spec, ObjectField):
        # A missing object defaults field by field, so each gap is recorded
        nested = value if isinstance(value, dict) else {}
        return _coerce_object(spec.schema, nested, where, tracker)

    raise TypeError(f"Unsupported field spec: {spec!r}")


def _coerce_object(schema: ObjectSchema, raw: Dict[str, Any], path: str, tracker: _Tracker) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for spec in schema.fields:
        coerced = _coerce_field(spec, raw, path, tracker)
        if coerced is None and isinstance(spec, OptionalTextField):
            continue
        out[spec.name] = coerced
    if schema.finalize is not None:
        out = schema.finalize(out)
    return out


def _build(schema: ObjectSchema, data: Dict[str, Any]) -> Any:
    if schema.model is None:
        return data
    return schema.model.model_validate(data)


def coerce_item(schema: ObjectSchema, raw: Dict[str, Any], path: str = "") -> Tuple[Any, _Tracker]:
    """Coerce one already-parsed object. Raises `_MissingIdentity` if it cannot be kept."""
    tracker = _Tracker()
    data = _coerce_object(schema, raw, path, tracker)
    return _build(schema, data), tracker


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def _collection_items(parsed: Any, schema: ObjectSchema) -> Sequence[Any]:
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict) and isinstance(parsed.get(schema.collection_key), list):
        return parsed[schema.collection_key]
    raise GenerationError(
        ErrorKind.MALFORMED_RESPONSE,
        f"Expected an array or an object with a {schema.collection_key!r} array",
    )


def coerce(raw_text: str, schema: ObjectSchema, *, max_items: Optional[int] = None) -> CoercedResult:
    """Parse *raw_text* and coerce it into *schema*.

    Returns a `CoercedResult` whose value is a list of models for collection
    schemas, or a single model otherwise.

    Raises
    ------
    GenerationError
        MALFORMED_RESPONSE or EMPTY_RESULT. Never retried verbatim.
    """
    parsed = parse_json_document(raw_text)

    if schema.collection_key is None:
        if not isinstance(parsed, dict):
            raise GenerationError(ErrorKind.MALFORMED_RESPONSE, f"Expected a JSON object for {schema.name}")
        try:
            value, tracker = coerce_item(schema, parsed)
        except _MissingIdentity as missing:
            raise GenerationError(
                ErrorKind.MALFORMED_RESPONSE,
                f"{schema.name} is missing required field {missing.path!r}",
            ) from None
        _log_repairs(schema, tracker.defaulted, tracker.clamped, 0)
        return CoercedResult(
            value=value,
            degraded=bool(tracker.defaulted),
            defaulted_fields=tracker.defaulted,
            clamped_fields=tracker.clamped,
        )

    items: List[Any] = []
    defaulted: List[str] = []
    clamped: List[str] = []
    dropped = 0

    for index, raw_item in enumerate(_collection_items(parsed, schema)):
        path = f"{schema.collection_key}[{index}]"
        if not isinstance(raw_item, dict):
            dropped += 1
            continue
        try:
            value, tracker = coerce_item(schema, raw_item, path)
        except _MissingIdentity as missing:
            logger.warning("[COERCE] Dropping %s: missing %s", path, missing.path)
            dropped += 1
            continue
        items.append(value)
        defaulted.extend(tracker.defaulted)
        clamped.extend(tracker.clamped)

    if max_items is not None and len(items) > max_items:
        items = items[:max_items]

    if not items:
        raise GenerationError(
            ErrorKind.EMPTY_RESULT,
            f"Model produced zero valid {schema.collection_key} ({dropped} dropped)",
        )

    _log_repairs(schema, defaulted, clamped, dropped)
    return CoercedResult(
        value=items,
        degraded=bool(defaulted),
        defaulted_fields=defaulted,
        clamped_fields=clamped,
        dropped_items=dropped,
    )


def _log_repairs(schema: ObjectSchema, defaulted: List[str], clamped: List[str], dropped: int) -> None:
    if defaulted or clamped or dropped:
        logger.info(
            "[COERCE] %s repaired — defaulted=%d clamped=%d dropped=%d",
            schema.name,
            len(defaulted),
            len(clamped),
            dropped,
        )
