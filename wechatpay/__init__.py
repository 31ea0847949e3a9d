"""
WeChat Pay Gateway Client for Django

Request signing (RSA and legacy shared-secret), response decoding and
verified file downloads for the WeChat Pay merchant API.
"""

__version__ = "0.1.0"
