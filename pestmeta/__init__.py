"""Grammar AST, parser nodes, literal unescaping and optimizer passes for PEG grammars."""

__version__ = "0.1.0"
__all__ = [
    "ast",
    "nodes",
    "convert",
    "escapes",
    "passes",
    "optimized",
    "restorer",
    "optimizer",
]