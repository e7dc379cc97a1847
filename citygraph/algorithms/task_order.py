"""Task ordering derived from a component order.

Maps an order over condensation vertices back to the original tasks. Tasks
of one component form a single phase; inside a phase they are listed in
ascending vertex order.
"""

from __future__ import annotations

from typing import Dict, List, Sequence


class TaskOrdering:
    """Expand a component-level order into task-level views.

    Example:
        >>> ordering = TaskOrdering([1, 0], [[2, 0], [1]])
        >>> ordering.task_order()
        [1, 0, 2]
        >>> ordering.task_phases()
        {1: 0, 2: 1, 0: 1}
    """

    def __init__(
        self, component_order: Sequence[int], components: Sequence[Sequence[int]]
    ) -> None:
        """
        Args:
            component_order: Component indices in execution order.
            components: Component index -> its vertices (any order).

        Raises:
            ValueError: If the order names an unknown component.
        """
        for comp in component_order:
            if not 0 <= comp < len(components):
                raise ValueError(
                    f"Component {comp} is out of range [0, {len(components)})."
                )
        self._component_order = list(component_order)
        self._components = components

    @property
    def component_order(self) -> List[int]:
        return list(self._component_order)

    def grouped_order(self) -> List[List[int]]:
        """One sorted task group per phase, in phase order."""
        return [sorted(self._components[comp]) for comp in self._component_order]

    def task_order(self) -> List[int]:
        """Concatenation of the phase groups."""
        return [task for group in self.grouped_order() for task in group]

    def task_phases(self) -> Dict[int, int]:
        """Map every task to its phase (its component's position in the order)."""
        return {
            task: phase
            for phase, comp in enumerate(self._component_order)
            for task in self._components[comp]
        }
