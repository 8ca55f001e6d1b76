"""
ID generation utilities for the knowledge graph.

All IDs are derived from content, never random, so re-ingesting the
same material produces the same identifiers:
- Sources: source_<type>_<16 hex chars of the content hash>
- Nodes: node_<source_id>_<chunk_index>
- Edges: edge_<source_id>_<chunk_index>
"""


def generate_source_id(source_type: str, content_hash: str) -> str:
    """
    Generate Source ID from its type and content hash.

    Args:
        source_type: Source type value (note, file, url)
        content_hash: Hash string, optionally prefixed with "sha256:"

    Returns:
        ID in format "source_<type>_<16 hex>"
    """
    digest = content_hash.split(":", 1)[-1]
    return f"source_{source_type}_{digest[:16]}"


def generate_node_id(source_id: str, chunk_index: int) -> str:
    """
    Generate Node ID based on parent source.

    Args:
        source_id: Parent source ID
        chunk_index: Zero-based chunk index

    Returns:
        ID in format "node_<source_id>_<N>"
    """
    return f"node_{source_id}_{chunk_index}"


def generate_edge_id(source_id: str, chunk_index: int) -> str:
    """
    Generate the ID of the edge leaving chunk ``chunk_index`` of a source.

    Args:
        source_id: Source ID both endpoints belong to
        chunk_index: Index of the edge's origin chunk

    Returns:
        ID in format "edge_<source_id>_<N>"
    """
    return f"edge_{source_id}_{chunk_index}"
