"""
Evidence produced by motion: snapshot images and the event log.
"""
