"""
Services module - Business logic layer for the port tally tracker.

Pure domain functions (date normalization, import merge, DET classification,
production statistics, tally numbering) live beside the ``*Service`` classes
that persist their results.
"""
