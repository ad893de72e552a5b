"""
Graph configuration, state, routing and construction for the generation pipeline.

The compiled graph is built by ``tripbuddy.generation.graph.build.create_generation_graph``;
it is not re-exported here because the node modules import this package's state.
"""

from tripbuddy.generation.graph.config import GenerationConfig, DEFAULT_CONFIG, get_config

__all__ = ["GenerationConfig", "DEFAULT_CONFIG", "get_config"]
