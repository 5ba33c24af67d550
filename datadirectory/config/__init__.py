"""
Configuration loading and validation for the data directory tools.

Provides strongly typed settings objects for the data models service, the
directory being described, and logging, with upfront validation.
"""
