"""
Schemas module - Request/Response schemas for API endpoints and the
ValidationResult shape shared by the pipeline.
"""
