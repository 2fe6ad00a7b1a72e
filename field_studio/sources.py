"""
Point-source records and the homogeneous registry that owns them.

Three flavours of source share the same ``(id, x, y, kind)`` shape:
:class:`Pole` for the grid/flow/circular fields, :class:`ElevationPoint` for
topography and :class:`TurbulenceSource` for turbulence. Each visualization
keeps exactly one :class:`SourceRegistry` of a single flavour.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, replace
from typing import Callable, ClassVar, Dict, Generic, Iterator, List, Optional, Tuple, Type, TypeVar

from .constants import DEFAULT_POLE_STRENGTH, POLE_CLICK_RADIUS


def _check_kind(cls_name: str, kind: str, valid: Tuple[str, ...]) -> None:
    if kind not in valid:
        raise ValueError(f"{cls_name}.kind must be one of {', '.join(repr(k) for k in valid)}; got {kind!r}")


@dataclass
class Pole:
    """
    Field pole for the grid, flow and circular visualizations.

    Parameters
    ----------
    kind : str
        ``'attractor'``, ``'repeller'``, ``'vortex'`` or ``'quantum'``.
    is_positive : bool
        Per-pole sign; composed with the global polarity mode.
    radius, phase : float
        Envelope length and phase offset, only used by quantum poles.
    """

    id: str
    x: float
    y: float
    strength: float = DEFAULT_POLE_STRENGTH
    is_positive: bool = True
    kind: str = "attractor"
    radius: float = 100.0
    phase: float = 0.0
    name: str = ""

    KINDS: ClassVar[Tuple[str, ...]] = ("attractor", "repeller", "vortex", "quantum")

    def __post_init__(self) -> None:
        _check_kind("Pole", self.kind, self.KINDS)

    @staticmethod
    def display_name(kind: str, index: int) -> str:
        return f"Pole {index + 1}"


@dataclass
class ElevationPoint:
    """Terrain control point: a peak, valley, saddle or ridge."""

    id: str
    x: float
    y: float
    elevation: float = 500.0
    kind: str = "peak"
    radius: float = 100.0
    name: str = ""

    KINDS: ClassVar[Tuple[str, ...]] = ("peak", "valley", "saddle", "ridge")
    NAMES: ClassVar[Dict[str, str]] = {"peak": "Peak", "valley": "Valley", "saddle": "Saddle", "ridge": "Ridge"}

    def __post_init__(self) -> None:
        _check_kind("ElevationPoint", self.kind, self.KINDS)

    @classmethod
    def display_name(cls, kind: str, index: int) -> str:
        return f"{cls.NAMES[kind]} {index + 1}"


@dataclass
class TurbulenceSource:
    """Turbulence emitter. ``angle`` (degrees) only matters for uniform flow."""

    id: str
    x: float
    y: float
    strength: float = 50.0
    kind: str = "vortex"
    angle: float = 0.0
    name: str = ""

    KINDS: ClassVar[Tuple[str, ...]] = ("vortex", "source", "sink", "uniform")
    NAMES: ClassVar[Dict[str, str]] = {"vortex": "Vortex", "source": "Source", "sink": "Sink", "uniform": "Flow"}

    def __post_init__(self) -> None:
        _check_kind("TurbulenceSource", self.kind, self.KINDS)

    @classmethod
    def display_name(cls, kind: str, index: int) -> str:
        return f"{cls.NAMES[kind]} {index + 1}"


S = TypeVar("S", Pole, ElevationPoint, TurbulenceSource)


def generate_source_id() -> str:
    """Opaque 9-character identifier."""
    return uuid.uuid4().hex[:9]


class SourceRegistry(Generic[S]):
    """
    In-memory, ordered collection of sources of a single type.

    The registry is the only mutable state besides the animation clock. It is
    single-writer: callers sequence mutation and field queries on one thread.
    """

    def __init__(self, source_type: Type[S], id_factory: Optional[Callable[[], str]] = None):
        self.source_type = source_type
        self._id_factory = id_factory or generate_source_id
        self._sources: List[S] = []

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add(self, kind: str, x: float, y: float, **fields) -> str:
        source_id = self._new_id()
        fields.setdefault("name", self.source_type.display_name(kind, len(self._sources)))
        self._sources.append(self.source_type(id=source_id, x=float(x), y=float(y), kind=kind, **fields))
        return source_id

    def insert(self, source: S) -> str:
        """Adopt an already-built source (e.g. a preset), keeping its id."""
        if not isinstance(source, self.source_type):
            raise TypeError(f"registry holds {self.source_type.__name__}, got {type(source).__name__}")
        if self._index(source.id) is not None:
            raise ValueError(f"duplicate source id {source.id!r}")
        self._sources.append(source)
        return source.id

    def remove(self, source_id: str) -> None:
        idx = self._index(source_id)
        if idx is not None:
            del self._sources[idx]

    def update(self, source_id: str, **partial) -> None:
        """Replace fields of one source; a missing id is ignored like in :meth:`remove`."""
        if "id" in partial:
            raise ValueError("source id cannot be changed")
        idx = self._index(source_id)
        if idx is not None:
            self._sources[idx] = replace(self._sources[idx], **partial)

    def move(self, source_id: str, x: float, y: float) -> None:
        self.update(source_id, x=float(x), y=float(y))

    def renumber(self) -> None:
        """Rename sources sequentially, e.g. after a removal."""
        self._sources = [
            replace(src, name=self.source_type.display_name(src.kind, i)) for i, src in enumerate(self._sources)
        ]

    def clear(self) -> None:
        self._sources.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, source_id: str) -> S:
        return self._sources[self._require(source_id)]

    def list(self) -> List[S]:
        return list(self._sources)

    def find_at(self, x: float, y: float, radius: float = POLE_CLICK_RADIUS) -> Optional[S]:
        """Closest source within ``radius`` of ``(x, y)``, if any."""
        best = None
        best_d = radius
        for src in self._sources:
            d = math.hypot(src.x - x, src.y - y)
            if d <= radius and (best is None or d < best_d):
                best, best_d = src, d
        return best

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[S]:
        return iter(list(self._sources))

    def __contains__(self, source_id: object) -> bool:
        return isinstance(source_id, str) and self._index(source_id) is not None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _index(self, source_id: str) -> Optional[int]:
        for i, src in enumerate(self._sources):
            if src.id == source_id:
                return i
        return None

    def _require(self, source_id: str) -> int:
        idx = self._index(source_id)
        if idx is None:
            raise KeyError(source_id)
        return idx

    def _new_id(self) -> str:
        source_id = self._id_factory()
        while self._index(source_id) is not None:
            source_id = self._id_factory()
        return source_id


__all__ = [
    "Pole",
    "ElevationPoint",
    "TurbulenceSource",
    "SourceRegistry",
    "generate_source_id",
]
