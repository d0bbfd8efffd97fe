"""Atlas packing, probe accumulation, scene effect and stage resource helpers for lightmap baking."""

__version__ = "0.1.0"