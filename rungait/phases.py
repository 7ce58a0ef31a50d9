"""Subdivision of a gait cycle into eight running-gait phases.

A single 2D camera cannot reliably locate true kinematic events such as
toe-off, so the default policy places phase boundaries at fixed
percentages of the cycle duration:

    ======  ===================  ==========
    Phase   Name                 % of cycle
    ======  ===================  ==========
    IC      Initial Contact      0 - 2
    LR      Loading Response     2 - 12
    MS      Mid Stance           12 - 35
    TS      Terminal Stance      35 - 50
    PSw     Pre-Swing            50 - 62
    ISw     Initial Swing        62 - 75
    MidSw   Mid Swing            75 - 87
    TSw     Terminal Swing       87 - 100
    ======  ===================  ==========

    Ref: Perry J, Burnfield JM. Gait Analysis: Normal and
    Pathological Function. 2nd ed. SLACK Incorporated; 2010.
    Ref: Novacheck TF. The biomechanics of running. Gait Posture.
    1998;7(1):77-95. doi:10.1016/S0966-6362(97)00038-6

The boundary rule is a strategy object (:class:`PhaseBoundaryPolicy`)
injected into cycle detection, so an event-based detector can replace
the percentage table without touching cycle detection or summaries.

Classes
-------
PhaseBoundaryPolicy
    Abstract policy: cycle index range -> eight PhaseSegments.
PercentBoundaryTable
    Default policy driven by a table of cumulative cycle fractions.

Functions
---------
segment_cycle
    Segment one ``(start_idx, end_idx)`` range with a policy.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from .constants import PHASE_NAMES
from .schema import PhaseSegment

logger = logging.getLogger(__name__)

# (phase name, end of phase as a fraction of the cycle)
DEFAULT_PHASE_TABLE: Tuple[Tuple[str, float], ...] = (
    ("IC", 0.02),
    ("LR", 0.12),
    ("MS", 0.35),
    ("TS", 0.50),
    ("PSw", 0.62),
    ("ISw", 0.75),
    ("MidSw", 0.87),
    ("TSw", 1.00),
)


class PhaseBoundaryPolicy(ABC):
    """Abstract base class for phase boundary policies.

    Subclasses must implement :meth:`segment`, which returns the eight
    PhaseSegments of one cycle. The returned segments must be
    contiguous, non-overlapping, in :data:`PHASE_NAMES` order, and
    exactly cover ``[start_idx, end_idx)``.
    """

    name: str = "base"

    @abstractmethod
    def segment(self, start_idx: int, end_idx: int) -> List[PhaseSegment]:
        """Split ``[start_idx, end_idx)`` into phase segments."""


class PercentBoundaryTable(PhaseBoundaryPolicy):
    """Phase boundaries at fixed fractions of the cycle length.

    Parameters
    ----------
    table : sequence of (str, float), optional
        ``(phase name, cumulative end fraction)`` pairs. Names must be
        :data:`PHASE_NAMES` in order, fractions strictly increasing and
        the last one equal to 1.0. Defaults to
        :data:`DEFAULT_PHASE_TABLE`.

    Raises
    ------
    ValueError
        If the table is malformed.
    """

    name = "percent_table"

    def __init__(self, table: Optional[Sequence[Tuple[str, float]]] = None):
        table = tuple((str(n), float(f)) for n, f in (table or DEFAULT_PHASE_TABLE))
        _validate_table(table)
        self.table = table

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(n for n, _ in self.table)

    @property
    def cuts(self) -> Tuple[float, ...]:
        """Cumulative fractions including the leading 0.0."""
        return (0.0,) + tuple(f for _, f in self.table)

    def segment(self, start_idx: int, end_idx: int) -> List[PhaseSegment]:
        start_idx = int(start_idx)
        end_idx = int(end_idx)
        if end_idx < start_idx:
            raise ValueError(f"end_idx ({end_idx}) must be >= start_idx ({start_idx})")
        length = end_idx - start_idx

        bounds = [start_idx + int(round(length * f)) for f in self.cuts]
        # Pin both ends so rounding can never leave a gap or overrun.
        bounds[0] = start_idx
        bounds[-1] = end_idx
        for i in range(1, len(bounds)):
            bounds[i] = min(max(bounds[i], bounds[i - 1]), end_idx)

        return [
            PhaseSegment(name, bounds[i], bounds[i + 1])
            for i, name in enumerate(self.names)
        ]

    def __repr__(self) -> str:
        return f"PercentBoundaryTable({list(self.table)!r})"


def _validate_table(table: Tuple[Tuple[str, float], ...]) -> None:
    names = tuple(n for n, _ in table)
    if names != PHASE_NAMES:
        raise ValueError(
            f"Phase table must list phases {list(PHASE_NAMES)} in order, got {list(names)}"
        )
    prev = 0.0
    for name, frac in table:
        if not prev < frac <= 1.0:
            raise ValueError(
                f"Phase fractions must be strictly increasing in (0, 1]; "
                f"{name}={frac} after {prev}"
            )
        prev = frac
    if prev != 1.0:
        raise ValueError(f"Last phase must end at 1.0, got {prev}")


def segment_cycle(
    cycle_range: Tuple[int, int],
    policy: Optional[PhaseBoundaryPolicy] = None,
) -> List[PhaseSegment]:
    """Return the eight PhaseSegments of one cycle.

    Parameters
    ----------
    cycle_range : tuple of int
        ``(start_idx, end_idx)`` half-open sample range.
    policy : PhaseBoundaryPolicy, optional
        Boundary policy (default: :class:`PercentBoundaryTable`).
    """
    if policy is None:
        policy = PercentBoundaryTable()
    start_idx, end_idx = cycle_range
    return policy.segment(start_idx, end_idx)
