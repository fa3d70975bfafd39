"""
Shape Change Tracker Module
===========================

Stateful edge detector for category changes.

Design:
- Encapsulates the last observed category and snapshot
- Clean API: update() returns a ShapeChangedEvent only on a change
- Replaces observable-property callbacks with an explicit
  compare-and-emit step the engine runs once per tick
- Not thread-safe by itself (the engine's tick thread owns it)
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from quadrilateral_shape.labels import NamedQuadrilateral
from quadrilateral_shape.model.snapshot import ShapeSnapshot


@dataclass(frozen=True)
class ShapeChangedEvent:
    """
    Category edge emitted at most once per tick.

    Attributes:
        previous: Category at the end of the previous tick
        current: Category now
        tick: Tick number on which the change was observed
        snapshot: Measurements that produced `current`
    """

    previous: NamedQuadrilateral
    current: NamedQuadrilateral
    tick: int
    snapshot: ShapeSnapshot

    def __post_init__(self):
        """Validate event."""
        if self.previous == self.current:
            raise ValueError(
                f"ShapeChangedEvent requires different categories, got {self.current.value} twice"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'previous': self.previous.value,
            'current': self.current.value,
            'tick': self.tick,
            'snapshot': self.snapshot.to_dict(),
        }


class ShapeChangeTracker:
    """
    Remembers the last category so changes can be reported as edges.

    State:
        category: Last observed category (None before the first update)
        snapshot: Last observed snapshot

    Usage:
        tracker = ShapeChangeTracker()
        tracker.update(NamedQuadrilateral.SQUARE, snap, tick=0)     # baseline, None
        tracker.update(NamedQuadrilateral.RECTANGLE, snap, tick=1)  # ShapeChangedEvent
    """

    def __init__(self):
        """Initialize empty tracker state."""
        self._category: Optional[NamedQuadrilateral] = None
        self._snapshot: Optional[ShapeSnapshot] = None
        self._changes = 0

    @property
    def category(self) -> Optional[NamedQuadrilateral]:
        return self._category

    @property
    def snapshot(self) -> Optional[ShapeSnapshot]:
        return self._snapshot

    def update(
        self,
        category: NamedQuadrilateral,
        snapshot: ShapeSnapshot,
        tick: int
    ) -> Optional[ShapeChangedEvent]:
        """
        Record the latest observation.

        Args:
            category: Category computed this tick
            snapshot: Snapshot computed this tick
            tick: Current tick number

        Returns:
            ShapeChangedEvent if the category differs from the last one,
            None otherwise (including the very first observation)
        """
        previous = self._category
        self._category = category
        self._snapshot = snapshot

        if previous is None or previous == category:
            return None

        self._changes += 1
        return ShapeChangedEvent(previous=previous, current=category, tick=tick, snapshot=snapshot)

    def snapshot_changed(self, snapshot: ShapeSnapshot) -> bool:
        """True if `snapshot` differs from the last recorded one."""
        return self._snapshot != snapshot

    def reset(self) -> None:
        """Forget the baseline; the next update will not emit."""
        self._category = None
        self._snapshot = None
        self._changes = 0

    def __len__(self) -> int:
        """Return number of changes emitted since the last reset."""
        return self._changes

    def __repr__(self) -> str:
        """Human-readable representation."""
        category = self._category.value if self._category else None
        return f"ShapeChangeTracker(category={category}, changes={self._changes})"
