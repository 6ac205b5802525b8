"""TimePort forms package.

Dynamic form definitions for attendance reports and requests: a schema
builder, conditional visibility, calculated fields and submission validation,
with a thin Flask JSON layer over MySQL-backed form templates.
"""
