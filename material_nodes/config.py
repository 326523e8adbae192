"""Default configuration values for material shader generation.

This module centralizes the naming conventions of the generated source.
Everything here can be overridden per compile through GeneratorSettings.
"""

from dataclasses import dataclass, field
from typing import FrozenSet

# Entry function wrapping the per-node locals
DEFAULT_ENTRY_NAME = "main"

# Pixel input struct passed to the entry function; default expressions
# such as "input.tex" refer to its variable name
DEFAULT_INPUT_STRUCT = "PixelInput"
DEFAULT_INPUT_NAME = "input"

# Struct returned by the entry function when a material output node is a root
DEFAULT_OUTPUT_STRUCT = "GeometryData"

DEFAULT_INDENT = "    "

# Intrinsics and keywords that generated identifiers must never shadow
RESERVED_WORDS = frozenset({
    # Intrinsics
    "abs", "acos", "all", "any", "asfloat", "asin", "asint", "asuint", "atan",
    "atan2", "ceil", "clamp", "clip", "cos", "cosh", "cross", "ddx", "ddy",
    "degrees", "distance", "dot", "exp", "exp2", "floor", "fmod", "frac",
    "fwidth", "length", "lerp", "log", "log10", "log2", "max", "min", "mul",
    "normalize", "pow", "radians", "reflect", "refract", "round", "rsqrt",
    "saturate", "sin", "sinh", "smoothstep", "sqrt", "step", "tan", "tanh",
    # Keywords
    "bool", "break", "buffer", "cbuffer", "const", "continue", "discard", "do",
    "double", "else", "false", "float", "float2", "float3", "float4",
    "float3x3", "float4x4", "for", "half", "if", "in", "inline", "inout",
    "int", "int2", "int3", "int4", "matrix", "out", "register", "return",
    "sample", "SamplerState", "static", "struct", "switch", "texture",
    "Texture2D", "TextureCube", "true", "uint", "uniform", "vector", "void",
    "while",
})


@dataclass(frozen=True)
class GeneratorSettings:
    """
    Naming and layout options for one compilation pass.

    Frozen so a settings object can be part of the compile cache key.
    """
    entry_name: str = DEFAULT_ENTRY_NAME
    input_struct: str = DEFAULT_INPUT_STRUCT
    input_name: str = DEFAULT_INPUT_NAME
    output_struct: str = DEFAULT_OUTPUT_STRUCT
    indent: str = DEFAULT_INDENT
    emit_section_comments: bool = True
    reserved_words: FrozenSet[str] = field(default=RESERVED_WORDS)

    def cache_key(self) -> str:
        return "|".join([
            self.entry_name, self.input_struct, self.input_name,
            self.output_struct, repr(self.indent), str(self.emit_section_comments),
            str(len(self.reserved_words)),
        ])
