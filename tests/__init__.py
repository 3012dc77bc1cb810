"""Test suite for npaperbot.

Unit tests cover identifier recognition, mention parsing, catalog search,
refresh scheduling and formatting. To run the tests, execute `pytest`
from the project root.
"""
