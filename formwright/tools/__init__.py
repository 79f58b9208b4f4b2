# formwright/tools/__init__.py
"""
Service layer shared by the CLI and by embedding applications.

One module per tool. Each tool takes its inputs plus a SchemaStore and
returns a response model as a dict.
"""
