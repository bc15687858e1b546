"""HTTP gateway in front of a retrieval-augmented-generation backend."""

__version__ = "0.1.0"
