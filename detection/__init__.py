"""
Per-frame motion detection: preprocessing, background model, mask
cleanup, region extraction, motion decision and snapshot throttling.
"""
