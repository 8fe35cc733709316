# Services package.
#
# One module per resource, each a set of async functions holding the
# business rules and database access for it:
#
#   article_service  - CRUD, validation, cascade delete and cache for Article
#   comment_service  - CRUD for Comment, scoped to its parent Article
#   user_service     - CRUD for User
#   session_service  - login / logout against the cookie session
#
# Service functions take the AsyncSession as first argument and flush but
# never commit; the request's transaction is owned by ``get_db``.
# Missing records raise blog.exceptions.NotFoundError, rejected writes
# raise ValidationError before anything is added to the session.
