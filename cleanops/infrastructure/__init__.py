"""
Infrastructure package: persistence and monitoring adapters.
"""
