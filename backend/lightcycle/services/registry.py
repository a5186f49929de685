from typing import Dict, List, Optional

from lightcycle.models import SLOT_ORDER, Slot


class SessionRegistry:
    """Maps the two fixed player slots to connection ids and back.

    A connection id is present in the inverse map only while it holds a slot.
    Lookups that find nothing return None; there are no error cases.
    """

    def __init__(self):
        self._roster: List[Optional[str]] = [None] * len(SLOT_ORDER)
        self._sid_to_slot: Dict[str, Slot] = {}

    def assign_slot(self, sid: str) -> Optional[Slot]:
        existing = self._sid_to_slot.get(sid)
        if existing is not None:
            return existing
        for index, slot in enumerate(SLOT_ORDER):
            if self._roster[index] is None:
                self._roster[index] = sid
                self._sid_to_slot[sid] = slot
                return slot
        return None

    def free_slot(self, sid: str) -> Optional[Slot]:
        slot = self._sid_to_slot.pop(sid, None)
        if slot is not None:
            self._roster[SLOT_ORDER.index(slot)] = None
        return slot

    def slot_of(self, sid: str) -> Optional[Slot]:
        return self._sid_to_slot.get(sid)

    def holder_of(self, slot: Slot) -> Optional[str]:
        return self._roster[SLOT_ORDER.index(slot)]

    def both_occupied(self) -> bool:
        return all(sid is not None for sid in self._roster)

    def has_free_slot(self) -> bool:
        return not self.both_occupied()

    def occupied(self) -> Dict[str, Optional[str]]:
        return {slot.value: self.holder_of(slot) for slot in SLOT_ORDER}
