"""
mkdocs-doxysearch — Doxygen search index lookup for MkDocs.

Loads the client-side search index Doxygen generates for an HTML
documentation tree and makes its symbols searchable from Python, from
MkDocs pages and from the command line.
"""

__version__ = "0.1.0"
