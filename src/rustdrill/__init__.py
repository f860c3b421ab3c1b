"""rustdrill: ejercicios de Rust uno a uno."""

__version__ = "0.1.0"
