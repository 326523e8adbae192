from enum import Enum, auto
from dataclasses import dataclass

class PinType(Enum):
    # Scalars
    FLOAT = auto()
    INT = auto()
    UINT = auto()
    BOOL = auto()

    # Vectors
    FLOAT2 = auto()
    FLOAT3 = auto()
    FLOAT4 = auto()

    INT2 = auto()
    INT3 = auto()
    INT4 = auto()

    # Resources. These never appear as locals, only as declarations
    # bound to a slot and passed by name.
    TEXTURE2D = auto()
    TEXTURE_CUBE = auto()
    SAMPLER = auto()

    def is_vector(self):
        return self in {
            PinType.FLOAT2, PinType.FLOAT3, PinType.FLOAT4,
            PinType.INT2, PinType.INT3, PinType.INT4,
        }

    def is_scalar(self):
        return self in {PinType.FLOAT, PinType.INT, PinType.UINT, PinType.BOOL}

    def is_numeric(self):
        return self.is_scalar() or self.is_vector()

    def is_texture(self):
        return self in {PinType.TEXTURE2D, PinType.TEXTURE_CUBE}

    def is_resource(self):
        return self.is_texture() or self == PinType.SAMPLER

    def component_count(self):
        if self in {PinType.FLOAT2, PinType.INT2}: return 2
        if self in {PinType.FLOAT3, PinType.INT3}: return 3
        if self in {PinType.FLOAT4, PinType.INT4}: return 4
        if self.is_resource(): return 0
        return 1

    def base_type(self):
        """Returns the scalar type of the vector components."""
        if self in {PinType.FLOAT2, PinType.FLOAT3, PinType.FLOAT4}: return PinType.FLOAT
        if self in {PinType.INT2, PinType.INT3, PinType.INT4}: return PinType.INT
        return self

    def with_components(self, count: int) -> 'PinType':
        """Same base type with a different component count (float3 -> float2)."""
        base = self.base_type()
        if count == 1:
            return base
        if base == PinType.FLOAT:
            return {2: PinType.FLOAT2, 3: PinType.FLOAT3, 4: PinType.FLOAT4}[count]
        if base == PinType.INT:
            return {2: PinType.INT2, 3: PinType.INT3, 4: PinType.INT4}[count]
        raise ValueError(f"{self.name} has no {count}-component form")

    @property
    def type_name(self) -> str:
        """Name of the type in the emitted source."""
        return _TYPE_NAMES[self]

    def __str__(self):
        return self.type_name


_TYPE_NAMES = {
    PinType.FLOAT: "float",
    PinType.INT: "int",
    PinType.UINT: "uint",
    PinType.BOOL: "bool",
    PinType.FLOAT2: "float2",
    PinType.FLOAT3: "float3",
    PinType.FLOAT4: "float4",
    PinType.INT2: "int2",
    PinType.INT3: "int3",
    PinType.INT4: "int4",
    PinType.TEXTURE2D: "Texture2D",
    PinType.TEXTURE_CUBE: "TextureCube",
    PinType.SAMPLER: "SamplerState",
}

# Implicit scalar conversions accepted on links
_SCALAR_COERCIONS = {
    (PinType.INT, PinType.FLOAT),
    (PinType.UINT, PinType.FLOAT),
    (PinType.BOOL, PinType.FLOAT),
    (PinType.UINT, PinType.INT),
}


@dataclass(frozen=True)
class SType:
    """
    Shape descriptor of a pin: element type plus arity.

    Arity > 1 declares a fixed-size array (float3 name[4]).
    """
    pin_type: PinType
    arity: int = 1

    def __post_init__(self):
        if self.arity < 1:
            raise ValueError(f"Arity must be >= 1, got {self.arity}")

    @property
    def name(self) -> str:
        return self.pin_type.type_name

    @property
    def is_texture(self) -> bool:
        return self.pin_type.is_texture()

    @property
    def is_array(self) -> bool:
        return self.arity > 1

    def declare(self, identifier: str) -> str:
        """Declaration text for a variable or parameter of this type."""
        if self.is_array:
            return f"{self.name} {identifier}[{self.arity}]"
        return f"{self.name} {identifier}"

    def __str__(self):
        if self.is_array:
            return f"{self.name}[{self.arity}]"
        return self.name


def can_coerce(source: SType, target: SType) -> bool:
    """
    True if a value of type `source` may flow into a pin of type `target`.

    Only dimension compatibility is checked; the truncation and broadcast
    themselves happen in the shading language.
    """
    if source.arity != target.arity:
        return False
    src, dst = source.pin_type, target.pin_type
    if src == dst:
        return True
    if src.is_resource() or dst.is_resource():
        return False
    if (src, dst) in _SCALAR_COERCIONS:
        return True
    if src.base_type() != dst.base_type():
        return False
    # Broadcast scalar -> vector
    if src.is_scalar() and dst.is_vector():
        return True
    # Truncate wider vector -> narrower vector
    if src.is_vector() and dst.is_vector():
        return src.component_count() > dst.component_count()
    return False


FLOAT = SType(PinType.FLOAT)
FLOAT2 = SType(PinType.FLOAT2)
FLOAT3 = SType(PinType.FLOAT3)
FLOAT4 = SType(PinType.FLOAT4)
TEXTURE2D = SType(PinType.TEXTURE2D)


def parse_type(value) -> SType:
    """
    Accept an SType, a PinType, or a type name ("FLOAT3" or "float3").
    """
    if isinstance(value, SType):
        return value
    if isinstance(value, PinType):
        return SType(value)
    if isinstance(value, str):
        if value in PinType.__members__:
            return SType(PinType[value])
        for pin_type, type_name in _TYPE_NAMES.items():
            if type_name == value:
                return SType(pin_type)
    raise ValueError(f"Unknown type {value!r}")
