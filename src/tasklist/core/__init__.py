"""Errors, ports (Protocols) and application state shared by all layers."""
