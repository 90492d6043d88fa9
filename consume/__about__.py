__all__ = ["__version__", "__author__", "__description__"]

__version__ = "0.3.0"
__author__ = "Ben Constable"
__description__ = "Active-record models for REST APIs, addressed by attribute"
