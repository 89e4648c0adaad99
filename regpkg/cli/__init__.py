"""Command line interface for regpkg"""
