"""layermap: layered dependency diagrams for source trees."""

__version__ = "0.3.0"
