"""cfreport -- self-contained HTML analytics reports for Cloudflare zones."""

__version__ = "0.3.0"
