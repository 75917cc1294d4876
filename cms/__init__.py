"""
File CMS - authenticated editing, duplication and versioning of
text, markdown and image documents stored as plain files.
"""
