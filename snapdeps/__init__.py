"""snapdeps - 分层依赖快照管理工具"""

__version__ = "0.1.0"
