# Constant formatting utilities for shader code generation

import numpy as np

from ...ir.types import PinType, SType


def _format_float(value) -> str:
    v = float(value)
    if not np.isfinite(v):
        raise ValueError(f"Cannot emit non-finite constant {v}")
    text = np.format_float_positional(np.float32(v), trim='-')
    if '.' not in text:
        text += ".0"
    return text


def _components(value, count: int) -> np.ndarray:
    """Flatten `value` to exactly `count` components (scalar broadcast, RGB -> RGBA)."""
    arr = np.atleast_1d(np.asarray(value, dtype=np.float64)).ravel()
    if arr.size == 1:
        return np.full(count, arr[0])
    if arr.size == count:
        return arr
    if arr.size == 3 and count == 4:
        return np.append(arr, 1.0)
    raise ValueError(f"Expected {count} components, got {arr.size}")


def format_scalar(value, pin_type: PinType) -> str:
    if pin_type == PinType.BOOL:
        return "true" if value else "false"
    if pin_type == PinType.INT:
        return str(int(value))
    if pin_type == PinType.UINT:
        v = int(value)
        if v < 0:
            raise ValueError(f"Negative value {v} for uint constant")
        return f"{v}u"
    return _format_float(value)


def format_constant(value, dtype: SType) -> str:
    """Format a Python or numpy value as a shader literal of type `dtype`."""
    pin_type = dtype.pin_type
    if pin_type.is_resource():
        raise ValueError(f"{dtype} has no literal form")

    if value is None:
        value = 0

    if dtype.is_array:
        items = list(value) if np.ndim(value) > 0 else [value] * dtype.arity
        if len(items) != dtype.arity:
            raise ValueError(f"Expected {dtype.arity} elements for {dtype}, got {len(items)}")
        element = SType(pin_type)
        return "{ " + ", ".join(format_constant(v, element) for v in items) + " }"

    if pin_type.is_scalar():
        if np.ndim(value) > 0:
            value = np.asarray(value).ravel()[0]
        return format_scalar(value, pin_type)

    count = pin_type.component_count()
    comps = _components(value, count)
    if pin_type.base_type() == PinType.INT:
        parts = [str(int(c)) for c in comps]
    else:
        parts = [_format_float(c) for c in comps]
    return f"{pin_type.type_name}({', '.join(parts)})"
