"""
Sparse fractional ordering for reorderable collections.

Each row in a scope carries a float ``order_index``; ascending index is list
order. Moving one item only rewrites that item's index, computed from the two
anchors the client dropped it between. Repeated bisection eventually runs out
of float precision, at which point the whole scope is renumbered to evenly
spaced multiples of the gap and the insertion is computed again.

Callers authorize before calling in here and commit afterwards; the engine
only flushes.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Type, Union

from sqlalchemy import and_, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tripboard.core.config import settings
from tripboard.core.exceptions import NotFoundError, RenumberRequired, ValidationError
from tripboard.core.logger import logger
from tripboard.models.itinerary.activity import Activity
from tripboard.models.itinerary.day_model import Day

Orderable = Union[Day, Activity]


class FractionalIndexer:
    """Float key scheme. Swap this out to change how keys are generated, not where they are stored."""

    def __init__(self, gap: float = settings.ORDER_GAP):
        self.gap = gap

    def first(self) -> float:
        return self.gap

    def append(self, last: Optional[float]) -> float:
        return self.first() if last is None else last + self.gap

    def between(self, lo: Optional[float], hi: Optional[float]) -> float:
        if lo is None and hi is None:
            return self.first()
        if lo is None:
            return hi / 2
        if hi is None:
            return lo + self.gap
        return (lo + hi) / 2

    @staticmethod
    def is_valid(lo: Optional[float], hi: Optional[float], candidate: float) -> bool:
        """True when ``candidate`` sorts strictly between the bounds that are present."""
        if not math.isfinite(candidate):
            return False
        if lo is not None and not candidate > lo:
            return False
        if hi is not None and not candidate < hi:
            return False
        return True

    def spaced(self, count: int) -> List[float]:
        return [self.gap * position for position in range(1, count + 1)]


@dataclass(frozen=True)
class OrderScope:
    """The group of rows whose indices are compared with each other."""
    model: Type[Orderable]
    trip_id: int
    day_id: Optional[int] = None

    @classmethod
    def days_of(cls, trip_id: int) -> "OrderScope":
        return cls(Day, trip_id)

    @classmethod
    def activities_of(cls, trip_id: int, day_id: Optional[int]) -> "OrderScope":
        return cls(Activity, trip_id, day_id)

    @classmethod
    def of_activity(cls, activity: Activity) -> "OrderScope":
        return cls.activities_of(activity.trip_id, activity.day_id)

    @property
    def key(self) -> str:
        if self.model is Day:
            return f"trip:{self.trip_id}:days"
        if self.day_id is None:
            return f"trip:{self.trip_id}:pool"
        return f"day:{self.day_id}"

    def criteria(self):
        clauses = [self.model.trip_id == self.trip_id]
        if self.model is Activity:
            if self.day_id is None:
                clauses.append(Activity.day_id.is_(None))
            else:
                clauses.append(Activity.day_id == self.day_id)
        return clauses

    def contains(self, item: Orderable) -> bool:
        if not isinstance(item, self.model) or item.trip_id != self.trip_id:
            return False
        if self.model is Activity:
            return item.day_id == self.day_id
        return True


def sort_key(item: Orderable):
    # Equal indices can appear under concurrent reorders; id breaks the tie.
    return (item.order_index, item.id)


class OrderingEngine:
    def __init__(self, indexer: Optional[FractionalIndexer] = None):
        self.indexer = indexer or FractionalIndexer()

    async def ordered(self, db: AsyncSession, scope: OrderScope) -> List[Orderable]:
        result = await db.execute(
            select(scope.model)
            .where(*scope.criteria())
            .order_by(scope.model.order_index, scope.model.id)
        )
        return list(result.scalars().all())

    async def append_index(self, db: AsyncSession, scope: OrderScope) -> float:
        result = await db.execute(
            select(func.max(scope.model.order_index)).where(*scope.criteria())
        )
        return self.indexer.append(result.scalar_one_or_none())

    async def renumber(self, db: AsyncSession, scope: OrderScope) -> int:
        """Respace every row of ``scope`` to gap multiples, keeping the current order."""
        items = await self.ordered(db, scope)
        for item, index in zip(items, self.indexer.spaced(len(items))):
            item.order_index = index
        await db.flush()
        logger.info(f"Renumbered {len(items)} items in scope {scope.key}")
        return len(items)

    async def _load_anchor(
        self,
        db: AsyncSession,
        scope: OrderScope,
        anchor_id: Optional[int],
        label: str,
    ) -> Optional[Orderable]:
        if anchor_id is None:
            return None
        anchor = await db.get(scope.model, anchor_id)
        if anchor is None:
            raise NotFoundError(f"{label.capitalize()} anchor {anchor_id} not found")
        if not scope.contains(anchor):
            raise ValidationError(f"{label.capitalize()} anchor {anchor_id} belongs to a different list")
        return anchor

    async def _neighbour(
        self,
        db: AsyncSession,
        scope: OrderScope,
        anchor: Optional[Orderable],
        forward: bool,
        moving_id: Optional[int],
    ) -> Optional[Orderable]:
        """
        The item directly after (``forward``) or before ``anchor`` in ``scope``.

        With no anchor this is the first or last item. The item being moved is
        never its own neighbour.
        """
        model = scope.model
        stmt = select(model).where(*scope.criteria())
        if moving_id is not None:
            stmt = stmt.where(model.id != moving_id)
        if anchor is not None:
            index, anchor_id = sort_key(anchor)
            if forward:
                stmt = stmt.where(or_(
                    model.order_index > index,
                    and_(model.order_index == index, model.id > anchor_id),
                ))
            else:
                stmt = stmt.where(or_(
                    model.order_index < index,
                    and_(model.order_index == index, model.id < anchor_id),
                ))
        if forward:
            stmt = stmt.order_by(model.order_index, model.id)
        else:
            stmt = stmt.order_by(model.order_index.desc(), model.id.desc())
        result = await db.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    def _place(self, scope: OrderScope, after: Optional[Orderable], before: Optional[Orderable]) -> float:
        lo = after.order_index if after is not None else None
        hi = before.order_index if before is not None else None
        candidate = self.indexer.between(lo, hi)
        if not self.indexer.is_valid(lo, hi, candidate):
            raise RenumberRequired(scope.key)
        return candidate

    async def compute_insertion_index(
        self,
        db: AsyncSession,
        scope: OrderScope,
        after_id: Optional[int] = None,
        before_id: Optional[int] = None,
        moving_id: Optional[int] = None,
    ) -> float:
        """
        Index for an item dropped between ``after_id`` and ``before_id`` in ``scope``.

        Anchors are validated before anything is written. When the bisection
        has no room left the scope is renumbered once and the index is
        computed again against the respaced anchors.
        """
        if after_id is not None and after_id == before_id:
            raise ValidationError("'after' and 'before' anchors must differ")
        if moving_id is not None and moving_id in (after_id, before_id):
            raise ValidationError("An item cannot be positioned relative to itself")

        after = await self._load_anchor(db, scope, after_id, "after")
        before = await self._load_anchor(db, scope, before_id, "before")
        if after is not None and before is not None and sort_key(after) >= sort_key(before):
            raise ValidationError("'after' anchor must come before the 'before' anchor")

        # A single anchor names one side of the gap; the other side is its
        # current neighbour.
        if after is not None and before is not None:
            successor = await self._neighbour(db, scope, after, True, moving_id)
            if successor is None or successor.id != before.id:
                raise ValidationError("'after' and 'before' anchors must be adjacent")
        elif after is not None:
            before = await self._neighbour(db, scope, after, True, moving_id)
        elif before is not None:
            after = await self._neighbour(db, scope, before, False, moving_id)
        else:
            after = await self._neighbour(db, scope, None, False, moving_id)

        try:
            return self._place(scope, after, before)
        except RenumberRequired:
            logger.info(f"Index space exhausted in scope {scope.key}, renumbering")
            # renumber() rewrites the anchors in the identity map, so the
            # respaced values are visible here without reloading.
            await self.renumber(db, scope)
            return self._place(scope, after, before)


ordering_engine = OrderingEngine()


async def compute_insertion_index(
    db: AsyncSession,
    scope: OrderScope,
    after_id: Optional[int] = None,
    before_id: Optional[int] = None,
    moving_id: Optional[int] = None,
) -> float:
    return await ordering_engine.compute_insertion_index(db, scope, after_id, before_id, moving_id)


async def append_index(db: AsyncSession, scope: OrderScope) -> float:
    return await ordering_engine.append_index(db, scope)
