from .loader import load_config
from .models import DocsConfig, RoleBakerConfig

__all__ = [
    "DocsConfig",
    "RoleBakerConfig",
    "load_config",
]
