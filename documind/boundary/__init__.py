"""
Boundary layer: database, chunk store and file storage adapters.
"""
