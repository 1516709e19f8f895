"""
Static Analysis Package.

Read-only analyses over parsed JavaScript that the rewrite passes consult.

Modules:
    - ``scope``: Lexical scopes, bindings, references, globals and labels.
    - ``boundary``: The earliest point where hoisting imports becomes observable.
"""
