"""依赖记录模块"""

from snapdeps.core.dep.models import Dependency

__all__ = [
    "Dependency",
]
