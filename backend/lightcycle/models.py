from enum import Enum
from typing import List, Optional

from lightcycle.grid import Cell


class Slot(str, Enum):
    RED = 'red'
    BLUE = 'blue'


# Fixed evaluation order: red before blue (pickup claims, collision checks)
SLOT_ORDER = (Slot.RED, Slot.BLUE)


class Heading(str, Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'

    @property
    def delta(self):
        return _DELTAS[self]

    @property
    def opposite(self) -> 'Heading':
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, value) -> Optional['Heading']:
        """Return the heading named by value, or None for anything else."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_DELTAS = {
    Heading.UP: (0, -1),
    Heading.DOWN: (0, 1),
    Heading.LEFT: (-1, 0),
    Heading.RIGHT: (1, 0),
}

_OPPOSITES = {
    Heading.UP: Heading.DOWN,
    Heading.DOWN: Heading.UP,
    Heading.LEFT: Heading.RIGHT,
    Heading.RIGHT: Heading.LEFT,
}


class Winner(str, Enum):
    NONE = 'none'
    RED = 'red'
    BLUE = 'blue'
    DRAW = 'draw'


def position_dict(cell: Cell) -> dict:
    return {'x': cell[0], 'y': cell[1]}


class Bike:
    """A light-cycle: current head, heading and a bounded trail (oldest first)."""

    def __init__(self, slot: Slot, position: Cell, heading: Heading, trail_capacity: int = 3):
        self.slot = slot
        self.position = position
        self.heading = heading
        self.trail: List[Cell] = []
        self.trail_capacity = trail_capacity

    @property
    def color(self) -> str:
        return self.slot.value

    def advance(self, cell_size: int) -> Cell:
        """Move the head one cell along the heading and record it in the trail."""
        dx, dy = self.heading.delta
        self.position = (self.position[0] + dx * cell_size, self.position[1] + dy * cell_size)
        self.trail.append(self.position)
        if len(self.trail) > self.trail_capacity:
            self.trail.pop(0)
        return self.position

    def turn(self, requested: Heading) -> bool:
        # No direct 180 degree reversal
        if requested == self.heading.opposite:
            return False
        self.heading = requested
        return True

    def to_dict(self):
        return {
            'x': self.position[0],
            'y': self.position[1],
            'heading': self.heading.value,
            'color': self.color,
            'trail': [position_dict(cell) for cell in self.trail],
            'trail_capacity': self.trail_capacity,
        }


class Pickup:
    def __init__(self, position: Cell):
        self.position = position

    def to_dict(self):
        return position_dict(self.position)
