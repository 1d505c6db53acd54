"""
Export subsystem for show presentations: plain text, native show files,
project/template bundles and PDF through a rendering host.
"""

__version__ = "0.1.0"
