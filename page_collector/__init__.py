"""
page-collector: capture web pages, extract their main text and store a short
extractive summary next to the raw HTML.
"""

__version__ = "0.1.0"
