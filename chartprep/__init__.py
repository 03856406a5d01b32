"""chartprep — shape tabular data for grammar-of-graphics charts."""
__version__ = "1.0.0"
