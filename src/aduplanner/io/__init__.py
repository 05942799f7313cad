"""Serialization, export projection and persistence bridges."""
