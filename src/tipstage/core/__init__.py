"""Core collection pipeline: loading, cross-references, index and rendering."""
