"""Security-focused tests for bucketview.

This package contains tests for the security boundary:
- Identifier validation (bookmark, profile and bucket names)
- Download path confinement and traversal prevention
- Error text redaction and friendly error messages
"""
