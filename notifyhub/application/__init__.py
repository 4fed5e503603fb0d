"""Application layer orchestrating domain entities and infrastructure."""
