"""
Core Package.

Contains the conversion machinery:
- Parsing (tree-sitter) and source splicing
- Traversal base classes
- Rewrite passes and the orchestrating AST Engine
- Fresh-name generation, tracing, and result models
"""
