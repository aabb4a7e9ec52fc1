from dataclasses import dataclass, field
from typing import Optional

@dataclass(frozen=True)
class TextureRef:
    """
    Reference to a texture owned by the external resource system.
    
    The generator never loads it; it only forwards the reference so the
    material system can bind it to the matching sampler uniform.
    """
    path: str
    # Editor metadata, not part of identity
    label: Optional[str] = field(default=None, compare=False, hash=False)

@dataclass(frozen=True)
class DefaultTextureParam:
    """A sampler uniform name paired with the texture bound to it by default."""
    name: str
    texture: Optional[TextureRef] = None
