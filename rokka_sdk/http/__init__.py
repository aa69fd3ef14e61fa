"""rokka SDK HTTP module.

This module contains the client of the rokka image-management API: request
construction, header injection, dispatch through a plain or retrying transport,
classification of failed responses and decoding of JSON responses into typed
results.
"""
