"""HAP explorer: black-box UI exploration for HarmonyOS applications.

The package is organised as:
- model: components, pages, device states and their signatures
- event: the input events the explorer can inject
- policy: the UI transition graph and the exploration strategies
- runtime: the driver loop and transition persistence
- config: options loading and validation
"""

__all__ = [
    "config",
    "errors",
    "event",
    "examples",
    "model",
    "policy",
    "runtime",
]
