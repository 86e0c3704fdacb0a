"""Validator registry and cross-field rules for wizard forms."""
