"""Concrete adapters (processes, HTTP)."""
