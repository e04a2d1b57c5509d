"""files2prompt: concatenate files into a single prompt for LLMs."""

__version__ = "0.1.0"
