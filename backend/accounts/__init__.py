# accounts/__init__.py
"""
Accounts app - Authentication and workspace sharing for LifeHub.

This app provides:
- User: Custom user model keyed by email
- Workspace: The tenant every record belongs to
- WorkspacePermission: Per-module grants for shared users
- WorkspaceInvitation / AuthorizedEmail: Invitations and the login allow-list
- ActorContext: Authorization context utilities

Tenant isolation is enforced at every layer through the ActorContext pattern.
"""
