"""Data management package for the claim verifier.

Storage adapters:
- KnowledgeStore: Chroma-backed background facts, shared per process
- InMemoryKnowledgeStore: Dependency-free stand-in for tests and local runs
"""

from claim_verifier.data_management.knowledge_store import (
    InMemoryKnowledgeStore,
    KnowledgeStore,
)

__all__ = [
    "InMemoryKnowledgeStore",
    "KnowledgeStore",
]
