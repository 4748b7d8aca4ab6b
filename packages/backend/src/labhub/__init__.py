"""LabHub — membership and content backend for an academic lab site.

Accounts and login, the team roster, co-authored publications, and the
small editable collections (address, roles, about text, technologies,
tutorials, notes) that make up the public site.
"""

__version__ = "0.1.0"
