"""
Core subpackage: configuration, domain enumerations, schemas and services.
"""
