"""Integration test package.

These tests exercise message handling end to end, from an incoming
update through catalog search to the replies handed to the transport.
They need no network access.
"""
