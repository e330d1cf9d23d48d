"""
Terminal rendering and picker helpers.
"""
