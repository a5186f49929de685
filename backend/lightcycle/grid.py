"""Board geometry helpers.

Cells are addressed by the world coordinate of their top-left corner, so every
in-bounds coordinate is a multiple of the cell size.
"""

import random
from typing import Optional, Tuple

Cell = Tuple[int, int]


def cells_across(dimension: int, cell_size: int) -> int:
    return dimension // cell_size


def random_cell(cell_size: int, width: int, height: int, rng: Optional[random.Random] = None) -> Cell:
    """Pick a cell uniformly over the whole board."""
    rng = rng or random
    x = rng.randrange(cells_across(width, cell_size)) * cell_size
    y = rng.randrange(cells_across(height, cell_size)) * cell_size
    return (x, y)


def in_bounds(cell: Cell, width: int, height: int) -> bool:
    x, y = cell
    return 0 <= x < width and 0 <= y < height


def snap(value: int, cell_size: int) -> int:
    return (value // cell_size) * cell_size
