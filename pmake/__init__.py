"""
pmake: project scaffolder driven by a small template preprocessor.
"""
