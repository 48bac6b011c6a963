"""Catalog logic that goes beyond plain CRUD: paginated search and author statistics."""
