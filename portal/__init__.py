"""
Business Monitor Portal - multi-tenant social media analytics backend
"""
__version__ = "0.1.0"
