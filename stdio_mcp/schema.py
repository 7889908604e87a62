"""Limited JSON Schema -> pydantic conversion for tool arguments.

Used by the command-line front end to check ``--args`` against a tool's
``input_schema`` before running it. The server itself passes arguments to
``Tool.run`` untouched.

Supported:
- ``type: object`` with ``properties`` and ``required`` (nested too)
- primitives: string, number, integer, boolean, null
- arrays, with typed ``items``
- ``enum`` -> ``Literal``
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from stdio_mcp.exceptions import InvalidArgumentsError

_PRIMITIVES: dict[str, Any] = {
    "string": str,
    "number": float,
    "integer": int,
    "boolean": bool,
    "null": type(None),
}


class _Arguments(BaseModel):
    # Tools may accept keys their schema does not list.
    model_config = ConfigDict(extra="allow")


def _schema_to_type(name: str, schema: dict[str, Any]) -> Any:
    enum = schema.get("enum")
    if isinstance(enum, list) and enum:
        values = []
        for v in enum:
            try:
                hash(v)
            except TypeError:
                continue
            values.append(v)
        if values:
            return Literal[tuple(values)]  # type: ignore[misc]

    t = schema.get("type")
    if t == "array":
        items = schema.get("items")
        item_t = _schema_to_type(f"{name}Item", items) if isinstance(items, dict) else Any
        return list[item_t]  # type: ignore[valid-type]
    if t == "object" and isinstance(schema.get("properties"), dict):
        return schema_to_model(name, schema)
    if isinstance(t, str):
        return _PRIMITIVES.get(t, Any)
    return Any


def schema_to_model(model_name: str, schema: dict[str, Any] | None) -> type[BaseModel]:
    """Build a pydantic model class for an object schema."""
    schema = schema or {}
    props = schema.get("properties") or {}
    required = set(schema.get("required") or [])

    fields: dict[str, tuple[Any, Any]] = {}
    if isinstance(props, dict):
        for name, prop_schema in props.items():
            if not isinstance(prop_schema, dict):
                continue
            py_type = _schema_to_type(f"{model_name}_{name}", prop_schema)
            desc = prop_schema.get("description", "")
            if name in required:
                fields[name] = (py_type, Field(..., description=desc))
            else:
                fields[name] = (py_type | None, Field(prop_schema.get("default"), description=desc))

    return create_model(model_name, __base__=_Arguments, **fields)  # type: ignore[call-overload]


def validate_arguments(tool_name: str, schema: dict[str, Any] | None, args: Any) -> dict[str, Any]:
    """Validate ``args`` against ``schema``; return the coerced arguments.

    Raises
    ------
    InvalidArgumentsError
        With one entry per violation (``path`` and ``message``).
    """
    model = schema_to_model(f"Args_{tool_name}", schema)
    try:
        parsed = model.model_validate(args if args is not None else {})
    except ValidationError as exc:
        errors = [
            {"path": "/" + "/".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise InvalidArgumentsError(tool_name, errors) from exc
    return parsed.model_dump(exclude_unset=True)
