"""
Generic utility functions shared across modules.

Currently holds the logging setup used by the library and the scripts.
"""
