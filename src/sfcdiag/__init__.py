from . import extrapolation, preprocessing, regime, similarity
from .column import (
    ColumnState,
    Overrides,
    Regime,
    StabilityCorrections,
    SurfaceDiagnostics,
)
from .model import SurfaceDiagnosticsModel, compute_surface_diagnostics
from .similarity import SimilarityTable, get_similarity_table

__all__ = [
    "ColumnState",
    "Overrides",
    "Regime",
    "SimilarityTable",
    "StabilityCorrections",
    "SurfaceDiagnostics",
    "SurfaceDiagnosticsModel",
    "compute_surface_diagnostics",
    "extrapolation",
    "get_similarity_table",
    "preprocessing",
    "regime",
    "similarity",
]
