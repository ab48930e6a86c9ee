"""
Configuration loading and validation for data locations and run options.

Provides a strongly typed settings object read from environment variables
(and an optional .env file) with upfront validation.
"""
