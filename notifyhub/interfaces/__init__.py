"""Outward facing interfaces of the service."""
