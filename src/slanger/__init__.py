"""slanger: validation-gated generation for constructed-language documents."""

__version__ = "0.1.0"
