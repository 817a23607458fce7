"""
On-screen rendering: overlays and OpenCV windows.
"""
