# Math Expression Emitters
# Handles: ADD, SUB, MUL, DIV, MODULO, MULTIPLY_ADD, POW, MIN, MAX, LERP, CLAMP,
# trig/rounding intrinsics, DOT, CROSS, LENGTH, NORMALIZE


def emit_add(args):
    return f"{args[0]} + {args[1]}"


def emit_sub(args):
    return f"{args[0]} - {args[1]}"


def emit_mul(args):
    return f"{args[0]} * {args[1]}"


def emit_div(args):
    return f"{args[0]} / {args[1]}"


def emit_multiply_add(args):
    """a * b + c"""
    return f"{args[0]} * {args[1]} + {args[2]}"


def emit_one_minus(args):
    return f"1.0 - {args[0]}"


def emit_intrinsic(name):
    """Emitter calling a built-in function with every argument in order."""
    def emit(args):
        return f"{name}({', '.join(args)})"
    return emit


# operation -> (input count, emitter)
MATH_OPERATIONS = {
    'ADD': (2, emit_add),
    'SUB': (2, emit_sub),
    'MUL': (2, emit_mul),
    'DIV': (2, emit_div),
    'MULTIPLY_ADD': (3, emit_multiply_add),
    'ONE_MINUS': (1, emit_one_minus),
    'MODULO': (2, emit_intrinsic('fmod')),
    'POW': (2, emit_intrinsic('pow')),
    'MIN': (2, emit_intrinsic('min')),
    'MAX': (2, emit_intrinsic('max')),
    'LERP': (3, emit_intrinsic('lerp')),
    'CLAMP': (3, emit_intrinsic('clamp')),
    'STEP': (2, emit_intrinsic('step')),
    'SMOOTHSTEP': (3, emit_intrinsic('smoothstep')),
    'SIN': (1, emit_intrinsic('sin')),
    'COS': (1, emit_intrinsic('cos')),
    'TAN': (1, emit_intrinsic('tan')),
    'ABS': (1, emit_intrinsic('abs')),
    'FLOOR': (1, emit_intrinsic('floor')),
    'CEIL': (1, emit_intrinsic('ceil')),
    'FRAC': (1, emit_intrinsic('frac')),
    'SQRT': (1, emit_intrinsic('sqrt')),
    'SATURATE': (1, emit_intrinsic('saturate')),
    'NORMALIZE': (1, emit_intrinsic('normalize')),
}

# Operations whose result is a scalar regardless of operand type
SCALAR_RESULT_OPERATIONS = {
    'DOT': (2, emit_intrinsic('dot')),
    'LENGTH': (1, emit_intrinsic('length')),
    'DISTANCE': (2, emit_intrinsic('distance')),
}

# Operations only defined for 3-component vectors
VECTOR3_OPERATIONS = {
    'CROSS': (2, emit_intrinsic('cross')),
}


def get_math_operation(operation: str):
    """Return (input count, emitter, scalar result) for `operation`."""
    if operation in MATH_OPERATIONS:
        count, emit = MATH_OPERATIONS[operation]
        return count, emit, False
    if operation in SCALAR_RESULT_OPERATIONS:
        count, emit = SCALAR_RESULT_OPERATIONS[operation]
        return count, emit, True
    if operation in VECTOR3_OPERATIONS:
        count, emit = VECTOR3_OPERATIONS[operation]
        return count, emit, False
    raise ValueError(f"Unknown math operation '{operation}'")
