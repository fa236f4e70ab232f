from .duckdb_store import GameLogStore

__all__ = ["GameLogStore"]
