"""Request objects, cell-block codecs, metrics and trace helpers for the HBase RPC protocol."""

__version__ = "0.1.0"