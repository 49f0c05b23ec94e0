"""
Pydantic schemas shared by the API and the core answer path.
"""
