"""
Authentication module for the hospital management system.

This module provides authentication and authorization functionality including:
- User registration for every role
- Form login with role-based landing redirects
- Session logout
"""
