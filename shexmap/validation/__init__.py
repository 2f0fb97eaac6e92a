"""SHACL conformance checks for reconstructed graphs."""

from .validate_shapes import check_output

__all__ = ["check_output"]
