"""Auto-discovery of provider modules.

Every .py file in this package that defines a `provider` object is
auto-registered by theme_converter.registry.discover().

The explicit imports below ensure PyInstaller includes these modules
in a frozen binary.
"""

# PyInstaller hidden imports: keep this list in sync with provider modules
import theme_converter.providers.docgen as _docgen  # noqa: F401
import theme_converter.providers.kate as _kate  # noqa: F401
