"""
Display-order management for manually ranked lists.

Projects, project images and portfolio items are each ranked by an integer
`display_order` within a scope (all projects, the images of one project, all
portfolio items). The effective order of a scope is `(display_order, id)`, so
duplicate values still sort deterministically.

Moving an entity one step swaps its `display_order` with the adjacent entity.
Both writes happen in one transaction: either both rows change or neither does.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Sequence
import logging

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studio.exceptions import NoAdjacentEntityError, NotFoundError, StoreReadError, WriteFailureError

logger = logging.getLogger(__name__)


class MoveDirection(str, Enum):
    """UP moves toward lower display_order (backward), DOWN toward higher (forward)."""
    UP = "up"
    DOWN = "down"

    @classmethod
    def _missing_(cls, value):
        aliases = {"backward": cls.UP, "forward": cls.DOWN}
        if isinstance(value, str):
            return aliases.get(value.lower())
        return None


@dataclass
class MoveResult:
    entity_id: int
    display_order: int
    swapped_with_id: int
    swapped_with_display_order: int


def _entity_name(model) -> str:
    return model.__name__


def scope_filters(model, scope_columns: Iterable[str], row: Any) -> list:
    """Build WHERE clauses restricting `model` to the scope `row` belongs to."""
    return [getattr(model, column) == getattr(row, column) for column in scope_columns]


async def next_display_order(db: AsyncSession, model, *scope) -> int:
    """
    Display order for a new entity appended to the end of its scope.

    Returns max(display_order) + 1 over the scope, or 1 if the scope is empty.
    """
    try:
        result = await db.execute(select(func.max(model.display_order)).where(*scope))
        current_max = result.scalar()
    except SQLAlchemyError as e:
        logger.error(f"Failed to read max display_order for {_entity_name(model)}: {str(e)}", exc_info=True)
        raise StoreReadError(f"{_entity_name(model)} display order", str(e)) from e

    return 1 if current_max is None else current_max + 1


async def _ordered_ids(db: AsyncSession, model, scope: Sequence) -> list[int]:
    result = await db.execute(
        select(model.id).where(*scope).order_by(model.display_order.asc(), model.id.asc())
    )
    return list(result.scalars().all())


async def _renumber(db: AsyncSession, model, ordered_ids: Sequence[int]) -> None:
    """Assign display_order 1..n following `ordered_ids`. Does not commit."""
    for position, entity_id in enumerate(ordered_ids, start=1):
        await db.execute(
            update(model)
            .where(model.id == entity_id)
            .values(display_order=position)
        )


async def move_one_step(
    db: AsyncSession,
    model,
    entity_id: int,
    direction: MoveDirection,
    scope_columns: Sequence[str] = (),
) -> MoveResult:
    """
    Swap an entity's display_order with its neighbor in the given direction.

    Args:
        db: Database session
        model: Mapped class with `id` and `display_order` columns
        entity_id: Entity to move
        direction: MoveDirection.UP or MoveDirection.DOWN
        scope_columns: Columns that must match for two rows to share a scope
            (e.g. ("project_id",) for project images)

    Returns:
        MoveResult: New display orders of the moved entity and its neighbor

    Raises:
        NotFoundError: Entity does not exist
        NoAdjacentEntityError: Entity is already first (UP) or last (DOWN)
        WriteFailureError: The swap was rejected; nothing was changed
    """
    name = _entity_name(model)
    direction = MoveDirection(direction)
    columns = [model.id, model.display_order] + [getattr(model, c) for c in scope_columns]

    try:
        result = await db.execute(select(*columns).where(model.id == entity_id))
        current = result.one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Failed to load {name} {entity_id} for reordering: {str(e)}", exc_info=True)
        raise StoreReadError(name, str(e)) from e

    if current is None:
        raise NotFoundError(name, entity_id)

    scope = scope_filters(model, scope_columns, current)

    if direction is MoveDirection.UP:
        before = or_(
            model.display_order < current.display_order,
            and_(model.display_order == current.display_order, model.id < current.id),
        )
        ordering = (model.display_order.desc(), model.id.desc())
    else:
        before = or_(
            model.display_order > current.display_order,
            and_(model.display_order == current.display_order, model.id > current.id),
        )
        ordering = (model.display_order.asc(), model.id.asc())

    try:
        result = await db.execute(
            select(model.id, model.display_order)
            .where(*scope, before)
            .order_by(*ordering)
            .limit(1)
        )
        adjacent = result.one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Failed to find adjacent {name} for {entity_id}: {str(e)}", exc_info=True)
        raise StoreReadError(name, str(e)) from e

    if adjacent is None:
        raise NoAdjacentEntityError(name, entity_id, direction.value)

    current_order = current.display_order
    adjacent_order = adjacent.display_order
    step = 1
    try:
        if current_order == adjacent_order:
            # Tied values: swapping would change nothing, so renumber the scope first
            ids = await _ordered_ids(db, model, scope)
            logger.warning(
                f"{name} {entity_id} shares display_order {current_order} with {adjacent.id}; "
                f"renumbering {len(ids)} rows"
            )
            await _renumber(db, model, ids)
            current_order = ids.index(current.id) + 1
            adjacent_order = ids.index(adjacent.id) + 1

        await db.execute(
            update(model)
            .where(model.id == current.id)
            .values(display_order=adjacent_order)
        )
        step = 2
        await db.execute(
            update(model)
            .where(model.id == adjacent.id)
            .values(display_order=current_order)
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to swap {name} {entity_id} with {adjacent.id} at step {step}: {str(e)}", exc_info=True)
        raise WriteFailureError(name, step, str(e)) from e

    logger.info(
        f"Moved {name} {entity_id} {direction.value}: "
        f"display_order {current_order} -> {adjacent_order}, swapped with {adjacent.id}"
    )

    return MoveResult(
        entity_id=current.id,
        display_order=adjacent_order,
        swapped_with_id=adjacent.id,
        swapped_with_display_order=current_order,
    )


async def reorder_scope(
    db: AsyncSession,
    model,
    ordered_ids: Sequence[int],
    *scope,
) -> list[int]:
    """
    Renumber a whole scope from an explicit id order.

    The given ids come first, in the given order; remaining rows of the scope
    follow in their current relative order. Every row ends up with a distinct
    display_order 1..n.

    Returns:
        list[int]: Final id order of the scope

    Raises:
        NotFoundError: An id is not part of the scope
        WriteFailureError: The update was rejected; nothing was changed
    """
    name = _entity_name(model)

    try:
        current_ids = await _ordered_ids(db, model, scope)
    except SQLAlchemyError as e:
        logger.error(f"Failed to read {name} order: {str(e)}", exc_info=True)
        raise StoreReadError(name, str(e)) from e

    known_ids = set(current_ids)
    missing_ids = [i for i in ordered_ids if i not in known_ids]
    if missing_ids:
        raise NotFoundError(name, missing_ids)

    requested = set(ordered_ids)
    final_ids = list(ordered_ids) + [i for i in current_ids if i not in requested]

    try:
        await _renumber(db, model, final_ids)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to reorder {name}: {str(e)}", exc_info=True)
        raise WriteFailureError(name, 1, str(e)) from e

    logger.info(f"Reordered {len(final_ids)} {name} rows")
    return final_ids
