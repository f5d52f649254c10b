"""Integration tests for the claim workflow.

These tests drive claims through the repository and database, checking that
the validation engine, reprocess records and the audit log agree.

Test categories:
- test_edit_workflow.py: end-to-end claim lifecycle through ClaimRepository
"""
