"""marshmallow schemas for request validation and response rendering.

Both modules are imported here so string references between them
(AuthorOutSchema.books -> "BookOutSchema") resolve through the registry.
"""
from models.schemas import author, book  # noqa: F401
