from .grid import CellGrid, TableDriver

__all__ = ["CellGrid", "TableDriver"]
