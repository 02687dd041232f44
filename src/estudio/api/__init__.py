"""HTTP API for the generation backend."""
