"""Data access: ingestion pipeline and data directory sources."""

from aggbench.core.data.sources import LoadResult, SourceKind, load_file, load_trades

__all__ = ["LoadResult", "SourceKind", "load_file", "load_trades"]
