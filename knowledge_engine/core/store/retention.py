"""
Per-user retention policy.

Snapshots are rebuilt and scored in full on every call, so the number of
sources per user is capped. Oldest sources go first.
"""

from knowledge_engine.models.snapshot import KnowledgeSnapshot


def apply_retention(
    snapshot: KnowledgeSnapshot,
    max_sources: int | None,
    keep_source_id: str | None = None,
) -> tuple[KnowledgeSnapshot, list[str]]:
    """
    Evict the oldest sources beyond ``max_sources``.

    Evicted sources take their nodes and edges with them. Ties on
    ``created_at`` are broken by source ID.

    Args:
        snapshot: Snapshot to trim
        max_sources: Maximum number of sources to keep; None disables the policy
        keep_source_id: Source that is never evicted (the one just ingested)

    Returns:
        Tuple of (trimmed snapshot, evicted source IDs oldest first)
    """
    if max_sources is None or len(snapshot.sources) <= max_sources:
        return snapshot, []

    excess = len(snapshot.sources) - max_sources
    candidates = sorted(
        (source for source in snapshot.sources if source.id != keep_source_id),
        key=lambda source: (source.created_at, source.id),
    )
    evicted = {source.id for source in candidates[:excess]}
    if not evicted:
        return snapshot, []

    trimmed = snapshot.model_copy(
        update={
            "sources": [source for source in snapshot.sources if source.id not in evicted],
            "nodes": [node for node in snapshot.nodes if node.source_id not in evicted],
            "edges": [edge for edge in snapshot.edges if edge.source_id not in evicted],
        }
    )
    return trimmed, [source.id for source in candidates[:excess]]
