"""
Interfaces module - Command line seeder and admin import API.
"""
