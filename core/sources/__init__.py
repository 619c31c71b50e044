"""Metadata sources for the schema mapper"""
