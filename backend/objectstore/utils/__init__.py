"""
Logging, metrics and concurrency helpers.
"""
