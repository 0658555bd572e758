"""
Script runtime: value model, scopes, callables, member access, standard
globals and the tree-walking interpreter.
"""
