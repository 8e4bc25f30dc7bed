from .military_base import military_base
from .user import user
from .asset import asset
from .personnel import personnel

__all__ = ["military_base", "user", "asset", "personnel"]
