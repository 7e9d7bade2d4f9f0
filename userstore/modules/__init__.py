"""
Shared modules: configuration, database wiring and the users module.
"""
