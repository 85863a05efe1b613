"""
Configuration files for the client, read with configobj and validated against a schema.
"""
