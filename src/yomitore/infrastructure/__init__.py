"""
Infrastructure Layer

Model clients and history persistence.
"""
