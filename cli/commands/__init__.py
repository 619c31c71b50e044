"""CLI subcommands"""
