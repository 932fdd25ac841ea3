"""Site subsystem: template assembly and all-or-nothing publishing."""

from blogsmith.site.assembler import DEFAULT_TEMPLATE_DIR, SiteAssembler
from blogsmith.site.models import AssemblyError, AssemblyResult, BuildReport
from blogsmith.site.writer import SiteWriter

__all__ = [
    "AssemblyError",
    "AssemblyResult",
    "BuildReport",
    "DEFAULT_TEMPLATE_DIR",
    "SiteAssembler",
    "SiteWriter",
]
