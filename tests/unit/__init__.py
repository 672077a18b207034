"""Unit tests for individual components in isolation.

Coverage:
    - generation/: chunking, batch scheduling, assembly, pipeline
    - agent/: generator configuration and per-section note agent
    - parsing/: PDF text extraction
    - db/: document CRUD and rate limit counters

Uses mocks for the model provider. Leverages pytest-check for multiple
assertions per test.
"""
