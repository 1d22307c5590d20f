"""
Command-line helpers: event preview and calendar inspection
"""
