"""Core flow logic — codec, schemas, results, and the flow engine."""
