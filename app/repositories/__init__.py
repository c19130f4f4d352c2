"""Persistence layer: module-level functions that take a Session first."""
