"""Authentication and authorization.

Learn: Users log in with email/password and receive a signed bearer
token carrying their id and role. Every protected route resolves that
token back to a stored user, then applies whatever extra checks the
route declares: team membership, the admin flag, or authorship.
"""
