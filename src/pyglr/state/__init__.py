"""State layer.

This package is the only place where patch entries are applied to a state
tree. Everything upstream (wrappers, flattening, action building) produces
entries; nothing upstream touches state.
"""
