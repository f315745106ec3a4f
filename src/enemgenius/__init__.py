"""ENEM Genius: ENEM-style question authoring with lightweight local retrieval."""

__version__ = "0.1.0"
