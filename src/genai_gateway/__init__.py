"""GenAI Gateway - forward text prompts and uploaded media to a generative model."""

__version__ = "0.1.0"
