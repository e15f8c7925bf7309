"""CV Generator - build a CV record and render it to a paginated PDF."""

__version__ = "0.3.0"
