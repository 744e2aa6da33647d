from .layout import MansionLayout
from .tiles import CellKind

__all__ = ["CellKind", "MansionLayout"]
