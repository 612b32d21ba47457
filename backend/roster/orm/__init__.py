# Importing the mapping registers every table and maps the domain classes
from roster.orm import mapping, tables
from roster.orm.mapping import AlternativeGradeEntry

__all__ = ["mapping", "tables", "AlternativeGradeEntry"]
