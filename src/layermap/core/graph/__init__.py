"""Container tree, edges, graph and layering."""

from layermap.core.graph.edges import Edge, EdgeCollection
from layermap.core.graph.graph import Graph
from layermap.core.graph.layering import LayerAssignment, assign_layers
from layermap.core.graph.model import Container, ContainerTree, Rectangle

__all__ = [
    "Container",
    "ContainerTree",
    "Edge",
    "EdgeCollection",
    "Graph",
    "LayerAssignment",
    "Rectangle",
    "assign_layers",
]
