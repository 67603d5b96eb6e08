"""Query intent extraction.

The intent layer converts an English free-text query into a `ParsedFilter`, which is then
rendered into the argument object of the record-fetch collaborator.
"""
