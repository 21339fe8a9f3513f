"""Sky Tonight: tonight's visible sky objects and the Stella stargazing guide."""

__version__ = "1.0.0"
