"""
Core domain layer.

Document processing (chunking, embedding, ingestion pipeline), hybrid
retrieval and answer generation.
"""
