import random
from typing import List, Optional

from lightcycle.grid import Cell, in_bounds, random_cell, snap
from lightcycle.models import SLOT_ORDER, Bike, Heading, Pickup, Slot, Winner


class MatchState:
    """Bikes, pickups and outcome of the current match.

    Owned by the session controller; every mutation goes through the methods
    below while the controller holds its lock.
    """

    def __init__(self, width: int, height: int, cell_size: int,
                 start_trail_capacity: int = 3, rng: Optional[random.Random] = None):
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self.start_trail_capacity = start_trail_capacity
        self.rng = rng or random.Random()
        self.bikes: List[Bike] = []
        self.pickups: List[Pickup] = []
        self.running = False
        self.winner = Winner.NONE
        self.reset()

    def start_position(self, slot: Slot) -> Cell:
        row = snap(self.height // 2, self.cell_size)
        if slot is Slot.RED:
            return (snap(self.width // 6, self.cell_size), row)
        return (snap(self.width * 5 // 6, self.cell_size), row)

    def reset(self) -> None:
        """Fresh bikes on opposite sides, one pickup, no winner, not running."""
        self.bikes = [
            Bike(Slot.RED, self.start_position(Slot.RED), Heading.RIGHT, self.start_trail_capacity),
            Bike(Slot.BLUE, self.start_position(Slot.BLUE), Heading.LEFT, self.start_trail_capacity),
        ]
        self.pickups = []
        self.running = False
        self.winner = Winner.NONE
        self.spawn_pickup()

    def bike(self, slot: Slot) -> Bike:
        return self.bikes[SLOT_ORDER.index(slot)]

    def spawn_pickup(self) -> Pickup:
        # Placement ignores trails; a pickup may land under a trail segment.
        pickup = Pickup(random_cell(self.cell_size, self.width, self.height, self.rng))
        self.pickups.append(pickup)
        return pickup

    def set_heading(self, slot: Slot, requested: Heading) -> bool:
        """Apply a turn for the next tick. Direct reversals are ignored."""
        return self.bike(slot).turn(requested)

    def is_colliding(self, bike: Bike) -> bool:
        if not in_bounds(bike.position, self.width, self.height):
            return True
        for other in self.bikes:
            # A bike's own newest trail cell is its head
            cells = other.trail[:-1] if other is bike else other.trail
            if bike.position in cells:
                return True
        return False

    def step(self) -> bool:
        """Advance one tick. Returns True when this tick ended the match."""
        if not self.running:
            return False

        for bike in self.bikes:
            bike.advance(self.cell_size)

        for pickup in list(self.pickups):
            for bike in self.bikes:
                if bike.position == pickup.position:
                    bike.trail_capacity += 1
                    self.pickups.remove(pickup)
                    self.spawn_pickup()
                    break

        red, blue = self.bike(Slot.RED), self.bike(Slot.BLUE)
        red_hit = self.is_colliding(red)
        blue_hit = self.is_colliding(blue)

        if red.position == blue.position or (red_hit and blue_hit):
            self.winner = Winner.DRAW
        elif red_hit:
            self.winner = Winner.BLUE
        elif blue_hit:
            self.winner = Winner.RED
        else:
            return False
        self.running = False
        return True

    def snapshot(self, lobby: bool = False) -> dict:
        payload = {
            'bikes': {bike.color: bike.to_dict() for bike in self.bikes},
            'pickups': [pickup.to_dict() for pickup in self.pickups],
            'running': self.running,
            'winner': None if self.winner is Winner.NONE else self.winner.value,
        }
        if lobby:
            payload['lobby'] = True
        return payload
