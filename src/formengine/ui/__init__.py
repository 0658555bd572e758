"""
UI runtime: element model, stateful bindings, renderer and the default
primitives table.
"""
