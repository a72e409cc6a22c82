"""Storefront catalog backend, browsing pipeline and page controllers."""
