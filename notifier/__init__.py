"""Transactional email service."""
