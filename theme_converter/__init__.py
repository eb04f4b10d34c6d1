"""theme-converter: resolve editor colour themes into concrete colours and render them.

Public entry points live in theme_converter.registry (providers, convert)
and theme_converter.core (colour registry, resolver, theme loader).
"""
