"""Utility functions for the rokka HTTP client.

This package contains the building blocks the client pipeline is made of:
- Request construction from the configured API address, path and query
- Classification of failed responses into structured errors
- JSON decoding of successful responses, with diagnostic context on mismatches
- Masking of credentials in log output
"""
