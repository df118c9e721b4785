"""Infrastructure layer: reading batch documents from disk.

The service layer bridges between these loaders and the domain.
"""
