"""kubealias - kubectl shell alias generator

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- Deterministic output (same inputs, same files)
- Degrade gracefully when the cluster is unreachable

kubealias assigns short, collision-free aliases to kubectl subcommands,
expands them over resource short names and flag modifiers, and keeps a
README reference section in sync with the generated file.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
