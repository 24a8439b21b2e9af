from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

from src.models.units import lbin_to_kipft

if TYPE_CHECKING:
    from src.models.reinforcement import StirrupLayer
    from src.models.section import BeamSection


class DuctilityClass(str, Enum):
    """Strain classification for phi selection (ACI 318-19 Table 21.2.2)."""

    TENSION_CONTROLLED = "tension-controlled"
    TRANSITION = "transition"
    COMPRESSION_CONTROLLED = "compression-controlled"


@dataclass
class TraceCheck:
    code_ref: str
    formula_id: str
    inputs: dict[str, float]
    value: float
    units: str
    status: str
    note: str = ""


@dataclass
class ResultBase:
    status: str
    status_code: str
    trace: list[TraceCheck] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError

    def __getitem__(self, key: str) -> Any:
        return self.to_dict()[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.to_dict().get(key, default)

    def keys(self):
        return self.to_dict().keys()

    def items(self):
        return self.to_dict().items()

    def values(self):
        return self.to_dict().values()

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __len__(self) -> int:
        return len(self.to_dict())


@dataclass
class NeutralAxisResult(ResultBase):
    c: float | None = None
    roots: list[float] = field(default_factory=list)
    iterations: int = 0
    residual: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status_code == "ok"

    def to_dict(self) -> dict[str, Any]:
        return {
            "c": self.c,
            "roots": list(self.roots),
            "iterations": self.iterations,
            "residual": self.residual,
            "status": self.status,
            "status_code": self.status_code,
            "trace": [t.__dict__ for t in self.trace],
        }


@dataclass(frozen=True)
class LayerResponse:
    """Strain, stress and force of one steel layer at the solved neutral axis.

    Strain and stress are tension positive; force is As * fs (lb).
    """

    role: str  # "tension" or "compression"
    bar_size: str
    quantity: int
    depth: float
    area: float
    strain: float
    stress: float
    force: float
    yielded: bool

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass
class DesignResult(ResultBase):
    section: BeamSection | None = None
    c: float = 0.0
    a: float = 0.0
    beta1: float = 0.0
    Mn: float = 0.0                 # lb-in
    phi: float = 0.0
    epsilon_t: float = 0.0
    depth_to_epsilon_t: float = 0.0
    ductility_class: DuctilityClass = DuctilityClass.TENSION_CONTROLLED
    As_tension: float = 0.0
    As_compression: float = 0.0
    rho: float = 0.0
    rho_balanced: float = 0.0
    rho_min: float = 0.0
    rho_max: float = 0.0
    is_over_reinforced: bool = False
    Mn_top: float = 0.0             # moments summed about the top fiber, lb-in
    Mn_tension: float = 0.0         # moments summed about the extreme tension layer, lb-in
    concrete_force: float = 0.0     # lb
    layers: list[LayerResponse] = field(default_factory=list)
    iterations: int = 0
    roots: list[float] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    # Shear quantities, kips (None until computed)
    Vc: float | None = None
    Vs: float | None = None
    Vn: float | None = None
    phi_shear: float | None = None
    phi_Vn: float | None = None
    stirrups: str | None = None

    @property
    def phi_Mn(self) -> float:
        return self.phi * self.Mn

    @property
    def Mn_kipft(self) -> float:
        return lbin_to_kipft(self.Mn)

    @property
    def phi_Mn_kipft(self) -> float:
        return lbin_to_kipft(self.phi_Mn)

    @property
    def width(self) -> float:
        return self.section.b if self.section is not None else 0.0

    @property
    def height(self) -> float:
        return self.section.h if self.section is not None else 0.0

    @property
    def gross_area(self) -> float:
        return self.section.gross_area if self.section is not None else 0.0

    def with_shear(self, shear: ShearCapacityResult) -> DesignResult:
        """Return a copy of this result carrying the given shear capacity."""
        governing = shear.governing
        return dataclasses.replace(
            self,
            section=self.section.clone() if self.section is not None else None,
            Vc=shear.Vc,
            Vs=shear.Vs,
            Vn=shear.Vn,
            phi_shear=shear.phi,
            phi_Vn=shear.phi_Vn,
            stirrups=governing.layer.describe() if governing is not None and governing.layer is not None else None,
            warnings=self.warnings + shear.warnings,
            trace=self.trace + shear.trace,
        )

    def describe(self) -> str:
        if self.section is None:
            return f"(No section) | PhiMn={self.phi_Mn_kipft:.1f} kip-ft"
        text = f"W: {self.section.b:g} x D: {self.section.h:g} | Ag = {self.section.gross_area:g} sq.in. | PhiMn={self.phi_Mn_kipft:.1f} kip-ft"
        if self.section.tension_layers:
            text += f" | Tension: {self.section.tension_summary()}"
        if self.section.compression_layers:
            text += f" | Compression: {self.section.compression_summary()}"
        if self.phi_Vn is not None:
            text += f" | PhiVn={self.phi_Vn:.1f} kips (Vc={self.Vc:.1f}, Vs={self.Vs:.1f})"
        if self.warnings:
            text += f" | Warnings: {'; '.join(self.warnings)}"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "section": self.section.to_dict() if self.section is not None else None,
            "c": self.c,
            "a": self.a,
            "beta1": self.beta1,
            "Mn": self.Mn,
            "phi": self.phi,
            "phi_Mn": self.phi_Mn,
            "Mn_kipft": self.Mn_kipft,
            "phi_Mn_kipft": self.phi_Mn_kipft,
            "epsilon_t": self.epsilon_t,
            "depth_to_epsilon_t": self.depth_to_epsilon_t,
            "ductility_class": self.ductility_class.value,
            "As_tension": self.As_tension,
            "As_compression": self.As_compression,
            "rho": self.rho,
            "rho_balanced": self.rho_balanced,
            "rho_min": self.rho_min,
            "rho_max": self.rho_max,
            "is_over_reinforced": self.is_over_reinforced,
            "Mn_top": self.Mn_top,
            "Mn_tension": self.Mn_tension,
            "concrete_force": self.concrete_force,
            "layers": [layer.to_dict() for layer in self.layers],
            "iterations": self.iterations,
            "roots": list(self.roots),
            "warnings": list(self.warnings),
            "Vc": self.Vc,
            "Vs": self.Vs,
            "Vn": self.Vn,
            "phi_shear": self.phi_shear,
            "phi_Vn": self.phi_Vn,
            "stirrups": self.stirrups,
            "status": self.status,
            "status_code": self.status_code,
            "trace": [t.__dict__ for t in self.trace],
        }


@dataclass(frozen=True)
class ShearLayerResult:
    layer: StirrupLayer | None
    Vs: float       # kips
    Vn: float       # kips
    phi_Vn: float   # kips

    def to_dict(self) -> dict[str, Any]:
        return {
            "layer": self.layer.to_dict() if self.layer is not None else None,
            "Vs": self.Vs,
            "Vn": self.Vn,
            "phi_Vn": self.phi_Vn,
        }


@dataclass
class ShearCapacityResult(ResultBase):
    Vc: float = 0.0
    Vs: float = 0.0
    Vs_max: float = 0.0
    Vn: float = 0.0
    phi: float = 0.0
    phi_Vn: float = 0.0
    d: float = 0.0
    layers: list[ShearLayerResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def governing(self) -> ShearLayerResult | None:
        if not self.layers:
            return None
        return min(self.layers, key=lambda item: item.phi_Vn)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Vc": self.Vc,
            "Vs": self.Vs,
            "Vs_max": self.Vs_max,
            "Vn": self.Vn,
            "phi": self.phi,
            "phi_Vn": self.phi_Vn,
            "d": self.d,
            "layers": [layer.to_dict() for layer in self.layers],
            "warnings": list(self.warnings),
            "status": self.status,
            "status_code": self.status_code,
            "trace": [t.__dict__ for t in self.trace],
        }


@dataclass
class ShearResult(ResultBase):
    Vc: float = 0.0
    phi_Vc: float = 0.0
    Vs_req: float = 0.0
    s_req: float | None = None
    s_max: float | None = None
    s_min: float | None = None
    Av: float = 0.0
    Av_bar: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "Vc": self.Vc,
            "phi_Vc": self.phi_Vc,
            "Vs_req": self.Vs_req,
            "s_req": self.s_req,
            "s_max": self.s_max,
            "s_min": self.s_min,
            "status": self.status,
            "status_code": self.status_code,
            "Av": self.Av,
            "Av_bar": self.Av_bar,
            "trace": [t.__dict__ for t in self.trace],
        }
