"""Storefront services: money helpers, catalog reads, order composition."""
