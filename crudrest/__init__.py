"""Generic REST scaffolding exposing persistent entities with uniform CRUD semantics."""

__version__ = "0.1.0"
