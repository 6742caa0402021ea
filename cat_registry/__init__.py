"""Cat registry API: users, cats and owner-scoped access control."""
