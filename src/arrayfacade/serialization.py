"""
Serialization helpers for ArrayFacade collections.

Provides JSON/YAML round-trip via the intermediate plain representation
produced by ArrayFacade.to_plain():
    - facades with sequential keys 0..n-1 become lists
    - all other facades become dicts
    - nested facades, mappings and lists are converted recursively

Loading wraps every nested list and dict back into an ArrayFacade, so
path shorthands and operators work on the loaded structure directly.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from arrayfacade.facade import ArrayFacade, plain_value
from arrayfacade.paths import INT_SEGMENT_RE


def to_plain(value: Any) -> Any:
    return plain_value(value)


def from_plain(value: Any) -> Any:
    """Wrap nested lists and dicts into ArrayFacades, leave scalars alone."""
    if isinstance(value, dict):
        return ArrayFacade.of({_restore_key(k): from_plain(v) for k, v in value.items()})
    if isinstance(value, list):
        return ArrayFacade.of([from_plain(v) for v in value])
    return value


def _restore_key(key: Any) -> Any:
    # JSON object keys are always strings; integer keys come back as "0", "1", ...
    if isinstance(key, str) and INT_SEGMENT_RE.match(key) and str(int(key)) == key:
        return int(key)
    return key


def facade_to_dict(facade: ArrayFacade) -> Dict[Any, Any]:
    plain = facade.to_plain()
    if isinstance(plain, list):
        return dict(enumerate(plain))
    return plain


def facade_to_json(facade: ArrayFacade) -> str:
    return json.dumps(facade.to_plain())


def facade_from_json(s: str) -> Any:
    return from_plain(json.loads(s))


def facade_to_yaml(facade: ArrayFacade) -> str:
    return yaml.safe_dump(facade.to_plain(), sort_keys=False)


def facade_from_yaml(s: str) -> Any:
    return from_plain(yaml.safe_load(s))
