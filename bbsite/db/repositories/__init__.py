"""Repository modules; import them by name (``from bbsite.db.repositories import revisions_repo``)."""
