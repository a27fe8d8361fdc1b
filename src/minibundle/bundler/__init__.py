"""minibundle bundler - module graph construction and bundle emission.

Example:
    >>> from minibundle.bundler import GraphBuilder, emit
    >>> graph = GraphBuilder("path/to/project").build("./src/main.js")
    >>> [m.id for m in graph]
    [0, 1, 2]
    >>> program = emit(graph)
"""

from minibundle.bundler.emitter import BundleEmitter, emit
from minibundle.bundler.graph import GraphBuilder, build_graph
from minibundle.bundler.models import BuildContext, Graph, Module
from minibundle.bundler.pipeline import BundleResult, build_bundle, bundle_project
from minibundle.bundler.resolver import ModuleResolver
from minibundle.bundler.runtime import render_loader
from minibundle.bundler.writer import read_source, write_bundle

__all__ = [
    # Models
    "Module",
    "Graph",
    "BuildContext",
    # Components
    "ModuleResolver",
    "GraphBuilder",
    "BundleEmitter",
    "build_graph",
    "emit",
    "render_loader",
    # I/O
    "read_source",
    "write_bundle",
    # Pipeline
    "BundleResult",
    "build_bundle",
    "bundle_project",
]
