"""Reactive layer — change propagation pipeline.

Connects source-tree changes to re-rendered output through impact
resolution and the batch writer.
"""

from tessera.reactive.pipeline import RebuildPipeline
from tessera.reactive.resolver import ImpactResolver, RebuildPlan, find_dependents

__all__ = [
    "ImpactResolver",
    "RebuildPipeline",
    "RebuildPlan",
    "find_dependents",
]
