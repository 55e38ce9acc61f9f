"""Link resolution event."""

from __future__ import annotations

from typing import TYPE_CHECKING

from citysim.core.decorators import event

if TYPE_CHECKING:
    from citysim.simulation import Simulation


@event
class ResolveLinks:
    """
    Add every declared link's contribution to its destination field.

    Simple links are evaluated as one batched matrix-vector product, advanced
    links one by one. All sources are read before any destination is written.
    Without declared links this event does nothing.

    Rule
    ----
        dst.f  +=  Σ_simple  src · w   +   Σ_advanced  transform(src)[f]
    """

    def execute(self, sim: Simulation) -> None:
        if not len(sim.links):
            return
        log = self.get_logger()
        updated = sim.links.resolve(sim.state)
        log.debug(f"  {len(sim.links)} links updated {updated} fields")
