"""
Data models catalog: the capability protocol, the HTTP client for the data
models service, and the in-memory index the scanner and validator consult.
"""
