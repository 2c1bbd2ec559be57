"""
Parque Valet - guest ticket lifecycle and payment backend
"""
__version__ = "1.0.0"
