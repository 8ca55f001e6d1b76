"""Core building blocks: embeddings, chunking, scoring and storage."""
