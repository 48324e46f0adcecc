"""Building blocks for acoustic fingerprinting: PCM reading and conversion, slicing, normalisation, filters, quantizers and result formatting."""

__version__ = "1.4.4"