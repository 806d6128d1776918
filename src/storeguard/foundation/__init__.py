"""Foundation - building blocks for storeguard.

Contains: status model and Result type, configuration, testing utilities.
"""
