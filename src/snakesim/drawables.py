from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Set

from .entities import Drawable, RenderData

if TYPE_CHECKING:
    from .snake import Snake


class DrawableSet:
    """The entities a host should render on its next redraw."""

    def __init__(self) -> None:
        self._items: Set[Drawable] = set()

    def add(self, drawable: Drawable) -> None:
        self._items.add(drawable)

    def add_snake(self, snake: "Snake") -> None:
        for segment in snake.segments:
            self._items.add(segment)

    def discard(self, drawable: Drawable) -> None:
        self._items.discard(drawable)

    def clear(self) -> None:
        self._items.clear()

    def render_data(self) -> List[RenderData]:
        return [item.render_data() for item in self._items]

    def __contains__(self, drawable: object) -> bool:
        return drawable in self._items

    def __iter__(self) -> Iterator[Drawable]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
