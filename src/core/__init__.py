"""Deployment core: domain, configuration, registry and services."""
