"""Lightweight player-intent validation utilities.

Provides minimal schema-like checking with clear, consistent error
responses; not a general JSON Schema implementation. Callers get
(ok, value_or_error) tuples and decide how to report a rejection.

Schema Mini-Language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int'
Extras examples:
  max_len (for str), min_len (str), allow_empty (str)
  min / max (for int)
  choices (str or int; value must be one of them)

Example:
 ok, data_or_err = validate_intent({'kind': 'move', 'dx': 1, 'dy': 0})

If invalid: (False, {'field': 'dx', 'error': 'expected int', 'code': 'type'})
If valid: (True, normalized_data)
"""
from __future__ import annotations
from typing import Any, Dict, Tuple

from delve.models.world import INVENTORY_CAPACITY

PRIMITIVES = {
    'str': str,
    'int': int,
}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, spec in schema.items():
        if not isinstance(spec, tuple) or len(spec) < 2:
            return _fail('__schema__', f'invalid spec for {name}', 'schema')
        type_name, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload:
            if required:
                return _fail(name, 'missing required field', 'required')
            else:
                continue
        value = payload[name]
        py_type = PRIMITIVES[type_name]
        # bool is an int subclass; a stray True must not pass as a step of 1
        if not isinstance(value, py_type) or (type_name == 'int' and isinstance(value, bool)):
            return _fail(name, f'expected {type_name}', 'type')
        if 'choices' in extras and value not in extras['choices']:
            return _fail(name, 'unsupported value', 'choices')
        if type_name == 'str':
            s = value.strip() if not extras.get('allow_empty') else value
            if not extras.get('allow_empty') and len(s) == 0:
                return _fail(name, 'must not be empty', 'empty')
            if 'max_len' in extras and len(value) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
            if 'min_len' in extras and len(value) < extras['min_len']:
                return _fail(name, 'too short', 'min_len')
            out[name] = s
        elif type_name == 'int':
            if 'min' in extras and value < extras['min']:
                return _fail(name, 'too small', 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(name, 'too large', 'max')
            out[name] = value
    return True, out

# Intent schemas keyed by 'kind'
STEP = ('int', True, {'min': -1, 'max': 1})
INVENTORY_SLOT = ('int', True, {'min': 0, 'max': INVENTORY_CAPACITY - 1})

INTENT_SCHEMAS = {
    'move': {'dx': STEP, 'dy': STEP},
    'pick_up': {},
    'use': {'slot': INVENTORY_SLOT},
    'drop': {'slot': INVENTORY_SLOT},
    'descend': {},
    'character_sheet': {},
    'toggle_display': {},
    'quit': {},
}

INTENT_KIND = {
    'kind': ('str', True, {'min_len': 1, 'max_len': 32, 'choices': tuple(INTENT_SCHEMAS)}),
}


def validate_intent(payload: Any) -> Tuple[bool, Dict[str, Any]]:
    """Validate one player intent; moves must be a single cardinal step."""
    ok, head = validate(payload, INTENT_KIND)
    if not ok:
        return ok, head
    kind = head['kind']
    ok, body = validate(payload, INTENT_SCHEMAS[kind])
    if not ok:
        return ok, body
    if kind == 'move' and abs(body['dx']) + abs(body['dy']) != 1:
        return _fail('dx', 'move must be one cardinal step', 'step')
    body['kind'] = kind
    return True, body
