"""tmpl - project scaffolding from small directive templates."""

__version__ = "0.2.0"
