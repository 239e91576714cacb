"""Results layer: online statistics collection."""

from seqmc.results.collector import StatCollector

__all__ = ["StatCollector"]
