"""Background knowledge store for pre-ingested fact-checking material.

One long-lived handle per process, created at startup and injected into the
pipeline. initialize() is idempotent and guarded by an asyncio.Lock, so
concurrent verifications can call it freely. When Chroma is unreachable the
store degrades to "unavailable": searches return [] and writes are skipped.

Usage:
    from claim_verifier.data_management.knowledge_store import KnowledgeStore

    store = KnowledgeStore()
    await store.initialize()
    hits = await store.similarity_search("hot water cures covid", limit=3)
"""

import asyncio
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

import chromadb
import structlog
from chromadb.config import Settings as ChromaSettings

from claim_verifier.agents.verification.schemas import KnowledgeHit
from claim_verifier.config.settings import settings

COLLECTION_DESCRIPTION = "Fact-checking sources and verified information"


def _clean_metadata(metadata: Optional[dict[str, Any]], ingested_at: str) -> dict[str, Any]:
    """Drop values Chroma cannot store (None, nested containers) and stamp ingestion time.

    Chroma rejects empty metadata, so every document carries ingestedAt.
    """
    cleaned: dict[str, Any] = {}
    for key, value in (metadata or {}).items():
        if isinstance(value, (str, int, float, bool)):
            cleaned[key] = value
    cleaned.setdefault("ingestedAt", ingested_at)
    return cleaned


class KnowledgeStore:
    """Chroma-backed similarity search over background facts.

    The chromadb HTTP client is synchronous; calls run in a worker thread
    under knowledge_store_timeout_seconds.

    Attributes:
        host: Chroma server host.
        port: Chroma server port.
        collection_name: Collection holding the background documents.
        timeout: Per-operation timeout in seconds.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        collection_name: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[Any] = None,
    ) -> None:
        """
        Args:
            host: Chroma host (defaults to settings.chroma_host).
            port: Chroma port (defaults to settings.chroma_port).
            collection_name: Collection name (defaults to settings.chroma_collection_name).
            timeout: Operation timeout (defaults to settings.knowledge_store_timeout_seconds).
            client: Pre-built chromadb client, mainly for tests.
        """
        self.host = host or settings.chroma_host
        self.port = port or settings.chroma_port
        self.collection_name = collection_name or settings.chroma_collection_name
        self.timeout = timeout or settings.knowledge_store_timeout_seconds
        self._client = client
        self._collection: Optional[Any] = None
        self._initialized = False
        self._lock = asyncio.Lock()
        self._logger = structlog.get_logger().bind(component="KnowledgeStore")

    @property
    def available(self) -> bool:
        return self._collection is not None

    def _connect(self) -> Any:
        client = self._client or chromadb.HttpClient(
            host=self.host,
            port=self.port,
            settings=ChromaSettings(anonymized_telemetry=False),
        )
        collection = client.get_or_create_collection(
            name=self.collection_name,
            metadata={"description": COLLECTION_DESCRIPTION},
        )
        self._client = client
        return collection

    async def initialize(self) -> None:
        """Connect and open the collection once. Never raises."""
        if self._initialized:
            return

        async with self._lock:
            if self._initialized:
                return
            try:
                self._collection = await asyncio.wait_for(
                    asyncio.to_thread(self._connect),
                    timeout=self.timeout,
                )
                self._logger.info(
                    "knowledge_store_ready",
                    collection=self.collection_name,
                    host=self.host,
                    port=self.port,
                )
            except Exception as e:
                self._collection = None
                self._logger.warning(
                    "knowledge_store_unavailable",
                    host=self.host,
                    port=self.port,
                    error=str(e) or type(e).__name__,
                )
            self._initialized = True

    async def similarity_search(self, query: str, limit: int = 5) -> list[KnowledgeHit]:
        """Return up to limit documents most similar to query.

        similarity is 1 - distance as reported by Chroma. Returns [] when the
        store is unavailable or the query fails.
        """
        await self.initialize()
        if self._collection is None or not query or limit <= 0:
            return []

        try:
            results = await asyncio.wait_for(
                asyncio.to_thread(
                    self._collection.query,
                    query_texts=[query],
                    n_results=limit,
                ),
                timeout=self.timeout,
            )
        except Exception as e:
            self._logger.error(
                "knowledge_search_failed",
                query=query[:50],
                error=str(e) or type(e).__name__,
            )
            return []

        documents = (results.get("documents") or [[]])[0] or []
        metadatas = (results.get("metadatas") or [[]])[0] or []
        distances = (results.get("distances") or [[]])[0] or []

        hits = []
        for i, text in enumerate(documents):
            if not text:
                continue
            metadata = metadatas[i] if i < len(metadatas) and metadatas[i] else {}
            distance = distances[i] if i < len(distances) and distances[i] is not None else 0.0
            hits.append(
                KnowledgeHit(text=text, metadata=dict(metadata), similarity=1 - distance)
            )

        self._logger.debug("knowledge_search", query=query[:50], hits=len(hits))
        return hits

    async def add_documents(self, documents: list[dict[str, Any]]) -> int:
        """Add {"text", "metadata"} documents to the collection.

        Returns:
            Number of documents written; 0 when unavailable or on error.
        """
        await self.initialize()
        documents = [d for d in documents if d.get("text")]
        if self._collection is None:
            self._logger.warning("knowledge_store_write_skipped", documents=len(documents))
            return 0
        if not documents:
            return 0

        stamp = int(time.time() * 1000)
        ingested_at = datetime.now(timezone.utc).isoformat()
        ids = [f"doc_{stamp}_{i}_{uuid.uuid4().hex[:8]}" for i in range(len(documents))]
        try:
            await asyncio.wait_for(
                asyncio.to_thread(
                    self._collection.add,
                    ids=ids,
                    documents=[d["text"] for d in documents],
                    metadatas=[_clean_metadata(d.get("metadata"), ingested_at) for d in documents],
                ),
                timeout=self.timeout,
            )
        except Exception as e:
            self._logger.error("knowledge_add_failed", error=str(e) or type(e).__name__)
            return 0

        self._logger.info("knowledge_documents_added", count=len(documents))
        return len(documents)

    async def get_stats(self) -> dict[str, Any]:
        await self.initialize()
        if self._collection is None:
            return {"count": 0, "available": False}
        try:
            count = await asyncio.wait_for(
                asyncio.to_thread(self._collection.count),
                timeout=self.timeout,
            )
        except Exception as e:
            self._logger.error("knowledge_stats_failed", error=str(e) or type(e).__name__)
            return {"count": 0, "available": False}
        return {"count": count, "available": True, "collection": self.collection_name}


class InMemoryKnowledgeStore:
    """Dependency-free knowledge store for tests and local runs.

    Similarity is the share of query terms found in a document.
    """

    def __init__(self, documents: Optional[list[dict[str, Any]]] = None) -> None:
        self._documents: list[dict[str, Any]] = []
        self._lock = asyncio.Lock()
        for document in documents or []:
            if document.get("text"):
                self._documents.append(
                    {"text": document["text"], "metadata": dict(document.get("metadata") or {})}
                )

    @property
    def available(self) -> bool:
        return True

    async def initialize(self) -> None:
        return None

    async def similarity_search(self, query: str, limit: int = 5) -> list[KnowledgeHit]:
        terms = {t for t in (query or "").lower().split() if t}
        if not terms or limit <= 0:
            return []

        async with self._lock:
            scored = []
            for document in self._documents:
                words = set(document["text"].lower().split())
                overlap = len(terms & words) / len(terms)
                if overlap > 0:
                    scored.append((overlap, document))

        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [
            KnowledgeHit(text=doc["text"], metadata=dict(doc["metadata"]), similarity=score)
            for score, doc in scored[:limit]
        ]

    async def add_documents(self, documents: list[dict[str, Any]]) -> int:
        added = 0
        async with self._lock:
            for document in documents:
                if document.get("text"):
                    self._documents.append(
                        {"text": document["text"], "metadata": dict(document.get("metadata") or {})}
                    )
                    added += 1
        return added

    async def get_stats(self) -> dict[str, Any]:
        async with self._lock:
            return {"count": len(self._documents), "available": True, "collection": "in_memory"}
