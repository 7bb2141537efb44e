"""
Placement Resource Portal
Study resources for campus placements, organized per company and in a
General Resources folder tree.

Architecture:
- PostgreSQL: Structured rows (resources, companies, bookmarks, profiles)
- MongoDB: Append-only resource_analytics event log
- Auth, file storage and signed URLs: external providers
"""

__version__ = "1.0.0"
