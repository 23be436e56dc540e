"""Persistence adapters for the roster collections."""
