"""
Central version constant for formengine.
"""

__version__ = "1.0.0"

# Version of the serialized render tree returned by to_data() and the server.
TREE_VERSION = "1"
