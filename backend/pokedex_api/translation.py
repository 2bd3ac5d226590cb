"""
Pokedex API — Request/Response Key Translation
===============================================

What:  Bridges the frontend's camelCase JSON and the snake_case columns.
Why:   The frontend posts `{"imageUrl": ..., "type": ...}` either flat or
       nested under the resource name; the services only ever see
       `{"image_url": ..., "poke_type": ...}`.
How:   Plain functions called by the routes at the request boundary (and by
       the exception handlers for error payloads). Response bodies are
       camelCased by the Pydantic schemas' own `alias_generator`.

Inbound pipeline (translate_params):
    {"name": "Pikachu", "imageUrl": "x.svg", "type": "electric"}
        │ wrap_parameters: copy known attributes under the resource key,
        │                  renaming type → poke_type, snake-casing the copy
        ▼
    {"name": ..., "imageUrl": ..., "type": ...,
     "pokemon": {"name": ..., "image_url": ..., "poke_type": ...}}
        │ underscore_keys: snake-case every key, recursively
        ▼
    {"name": ..., "image_url": ..., "type": ...,
     "pokemon": {"name": ..., "image_url": ..., "poke_type": ...}}
        │ permit: keep only allowed attributes under "pokemon"
        ▼
    {"name": ..., "image_url": ..., "poke_type": ...}
"""

from typing import Any, Dict, Iterable, List, Mapping

from pydantic.alias_generators import to_camel, to_snake


# External name → internal column name, where casing alone does not map them
INBOUND_RENAMES = {"type": "poke_type"}
OUTBOUND_RENAMES = {internal: external for external, internal in INBOUND_RENAMES.items()}

# Attributes a write request may set, per resource
POKEMON_ATTRIBUTES = (
    "number",
    "name",
    "attack",
    "defense",
    "poke_type",
    "image_url",
    "captured",
    "moves",
)
ITEM_ATTRIBUTES = (
    "pokemon_id",
    "name",
    "price",
    "happiness",
    "image_url",
)


def underscore(key: str) -> str:
    return to_snake(key)


def underscore_keys(value: Any) -> Any:
    """Recursively snake-cases every mapping key inside `value`."""
    if isinstance(value, Mapping):
        return {
            underscore(key) if isinstance(key, str) else key: underscore_keys(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [underscore_keys(item) for item in value]
    return value


def internal_name(key: str) -> str:
    snake = underscore(key)
    return INBOUND_RENAMES.get(snake, snake)


def wrap_parameters(
    params: Mapping[str, Any],
    resource: str,
    attributes: Iterable[str],
) -> Dict[str, Any]:
    """
    Duplicates the resource's attributes under `params[resource]`.

    Top-level keys are copied when their internal name is one of
    `attributes`; a body the caller already nested is merged in on top, so
    both request shapes end up identical. The nested copy uses internal,
    snake_cased names. Top-level keys are left as they were.
    """
    known = set(attributes)
    nested: Dict[str, Any] = {}
    for key, value in params.items():
        if key == resource:
            continue
        name = internal_name(key)
        if name in known:
            nested[name] = value

    given = params.get(resource)
    if isinstance(given, Mapping):
        for key, value in given.items():
            nested[internal_name(key)] = value

    wrapped = dict(params)
    wrapped[resource] = underscore_keys(nested)
    return wrapped


def translate_params(
    params: Mapping[str, Any],
    resource: str,
    attributes: Iterable[str],
) -> Dict[str, Any]:
    """Wraps the resource attributes, then snake-cases the whole body."""
    return underscore_keys(wrap_parameters(params, resource, attributes))


def permit(
    params: Mapping[str, Any],
    resource: str,
    allowed: Iterable[str],
) -> Dict[str, Any]:
    """
    Strong parameters: returns only the allowed attributes of `resource`.

    Anything else the client sent (ids, timestamps, unknown keys) is dropped.
    """
    nested = params.get(resource)
    if not isinstance(nested, Mapping):
        return {}
    allowed = set(allowed)
    return {key: value for key, value in nested.items() if key in allowed}


def camelize_field(name: str) -> str:
    return OUTBOUND_RENAMES.get(name) or to_camel(name)


def camelize_errors(errors: Mapping[str, List[str]]) -> Dict[str, List[str]]:
    """Field → messages map with external field names, for 422 payloads."""
    return {camelize_field(field): list(messages) for field, messages in errors.items()}
