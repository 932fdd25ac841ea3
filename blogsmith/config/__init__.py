from .loader import load_config
from .models import (
    BlogsmithConfig,
    ContentConfig,
    OutputConfig,
    RenderConfig,
    SiteConfig,
)

__all__ = [
    "BlogsmithConfig",
    "ContentConfig",
    "OutputConfig",
    "RenderConfig",
    "SiteConfig",
    "load_config",
]
