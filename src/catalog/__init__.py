"""Product catalog service.

REST API for registering users and managing product listings: filtered and
paginated browsing, owner/admin guarded mutations and image uploads.
"""

__version__ = "0.1.0"
