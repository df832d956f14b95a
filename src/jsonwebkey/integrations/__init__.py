"""Integrations with third-party token libraries."""
