from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Optional

class ResourceKind(Enum):
    TEXTURE = auto()  # Shader resource view, register(tN)
    SAMPLER = auto()  # Sampler state, register(sN)

    @property
    def register_prefix(self) -> str:
        return 't' if self == ResourceKind.TEXTURE else 's'

    @property
    def name_prefix(self) -> str:
        return 'tex' if self == ResourceKind.TEXTURE else 'samp'

@dataclass(unsafe_hash=True)
class ResourceDesc:
    """
    A declared shader resource bound to a register slot.

    The name is what method bodies reference; the slot is what the caller
    binds the GPU resource to.
    """
    kind: ResourceKind
    slot: int
    name: str
    type_name: str = "Texture2D"

    def declaration(self) -> str:
        return f"{self.type_name} {self.name} : register({self.kind.register_prefix}{self.slot});"

@dataclass(frozen=True)
class TextureBinding:
    """
    Slot pair owned by one texture node within a pass.

    All references to the same texture node inside one pass see the same
    binding, so they bind to the same declared resource.
    """
    node_id: int
    texture_slot: int
    sampler_slot: int
    texture_name: str
    sampler_name: str

@dataclass(frozen=True)
class ResourceBinding:
    """
    One entry of the slot -> resource table handed back to the caller.

    Attributes:
        kind: Texture or sampler
        slot: Register slot
        name: Declared identifier in the generated source
        node_id: Owning texture node
        source: Asset path (textures) or sampler description (samplers)
    """
    kind: ResourceKind
    slot: int
    name: str
    node_id: Optional[int] = None
    source: Optional[str] = field(default=None, compare=False)
