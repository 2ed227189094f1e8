"""
VirtualTourist - travel photo albums for map pins, sourced from Flickr
"""

__version__ = "0.1.0"
