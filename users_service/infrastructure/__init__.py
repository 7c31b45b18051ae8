"""Infrastructure layer: database pool and repository adapters"""
