"""
Services Package

This package contains business logic services that are:
- Separate from HTTP handling (routers)
- Reusable across different parts of the application
- Easier to test in isolation

Current services:
- auth.py: Named authentication strategies (local login, local signup)
- flash.py: One-time messages carried across a redirect
- rate_limiter.py: Rate limiting of credential submissions with slowapi
- security.py: Password hashing with bcrypt
- sessions.py: Server-side sessions tying a browser to a user
"""
