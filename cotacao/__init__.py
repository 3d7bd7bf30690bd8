"""USD/BRL quote service: polls an upstream quote API, stores and serves the bid."""

__version__ = "0.1.0"
