"""thisgen -- scaffolding and introspection for `this` API projects.

Adds entities and links to an existing project through anchor comments in its
generated files, rebuilds a structural model of the project from source, and
emits a typed client from that model.
"""

__version__ = "0.1.0"
