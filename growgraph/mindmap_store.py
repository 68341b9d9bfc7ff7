import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger("growgraph")


class MindMapStore:
    """
    Mind maps persisted as Firestore documents:
        {"nodes": [...], "edges": [...], "createdAt": "<ISO-8601 UTC>"}

    The client is a google.cloud.firestore.Client (or anything exposing
    collection(name).add/stream/document).
    """

    def __init__(self, client, collection: str = "mindmaps") -> None:
        self._client = client
        self.collection = collection

    def _collection(self):
        return self._client.collection(self.collection)

    def save(self, nodes: Any, edges: Any) -> str:
        doc = {
            "nodes": nodes,
            "edges": edges,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        _, doc_ref = self._collection().add(doc)
        logger.info(f"[DB] Saved mind map {doc_ref.id} to '{self.collection}'")
        return doc_ref.id

    def list_all(self) -> List[Dict[str, Any]]:
        return [{"id": snap.id, **(snap.to_dict() or {})} for snap in self._collection().stream()]

    def get(self, mindmap_id: str) -> Optional[Dict[str, Any]]:
        snap = self._collection().document(mindmap_id).get()
        if not snap.exists:
            return None
        return {"id": snap.id, **(snap.to_dict() or {})}
