"""
Shared Lambda utilities: bootstrap, client factories and HTTP helpers.
"""
