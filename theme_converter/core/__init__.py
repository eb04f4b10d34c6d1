"""theme_converter.core: Foundation layer.

Contains the colour value model, palette arithmetic, colour registry,
resolver, theme loader and settings. This module has NO dependencies on
theme_converter.providers or theme_converter.registry.
Only stdlib, numpy, PIL and json5 are allowed here.
"""
