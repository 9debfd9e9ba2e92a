"""
Command-line interface for schemadump.
"""
