"""HTTP API for the portfolio CMS."""
